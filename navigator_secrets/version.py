"""Navigator Secrets Meta information.
   Navigator Secrets stores client-encrypted secrets that expire or self-destruct.
"""
__title__ = 'navigator_secrets'
__description__ = (
   'Navigator Secrets stores client-encrypted secrets '
   'that expire or are destroyed after the first read.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-secrets'
