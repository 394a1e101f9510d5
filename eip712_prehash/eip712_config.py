# EIP712 configuration
# Constants shared by the struct encoder, the transform and the command line tool

import os

# Name of the domain struct every payload must declare
DOMAIN_TYPE_NAME = "EIP712Domain"

# EIP-191 version byte 0x01 prefix for structured data digests
EIP712_PREFIX = b"\x19\x01"

# ABI word size; every encoded field occupies exactly one word
WORD_SIZE = 32
ZERO_WORD = b"\x00" * WORD_SIZE

# Keys added to the payload handed to the signing device driver
DOMAIN_SEPARATOR_HASH_KEY = "domain_separator_hash"
MESSAGE_HASH_KEY = "message_hash"

# Only signTypedData_v4 encoding is supported
DEFAULT_VERSION = "V4"

LOG_LEVEL = os.getenv("EIP712_PREHASH_LOG_LEVEL", "WARNING").upper()
