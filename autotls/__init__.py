from .certificate import (
    DEFAULT_COMMON_NAME,
    DEFAULT_IPS,
    VALIDITY,
    SelfSignedCertificate,
    generate_self_signed_cert,
    parse_ip_addresses,
)
from .errors import AutoTLSError, GenerationError, InvalidInputError
from .transport import client_ssl_context, quic_configuration, server_ssl_context

__all__ = [
    "DEFAULT_COMMON_NAME",
    "DEFAULT_IPS",
    "VALIDITY",
    "AutoTLSError",
    "GenerationError",
    "InvalidInputError",
    "SelfSignedCertificate",
    "client_ssl_context",
    "generate_self_signed_cert",
    "parse_ip_addresses",
    "quic_configuration",
    "server_ssl_context",
]
