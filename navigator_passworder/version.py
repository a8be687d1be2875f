"""Navigator Passworder Meta information.
   Navigator Passworder encrypts serializable data into password-protected vaults.
"""
__title__ = 'navigator_passworder'
__description__ = (
   'Navigator Passworder encrypts serializable data into '
   'password-protected vault strings.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2026 Navigator Developers'
__author__ = 'Navigator Developers'
__license__ = 'Apache-2.0'
