"""Navigator AWS Meta information.
   Navigator AWS bootstraps AWS sessions and fetches secrets from Secrets Manager.
"""
__title__ = 'navigator_aws'
__description__ = (
   'Navigator AWS bootstraps an AWS session, assumes roles, verifies '
   'the caller identity and decodes secrets from Secrets Manager.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-aws'
