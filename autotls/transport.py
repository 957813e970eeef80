# Hand a generated certificate to a TLS stack.

import logging
import os
import ssl
import tempfile
from typing import Any, Sequence

from aioquic.quic.configuration import QuicConfiguration

from .certificate import SelfSignedCertificate

logger = logging.getLogger("autotls.transport")


def quic_configuration(
    bundle: SelfSignedCertificate,
    alpn_protocols: Sequence[str],
    **kwargs: Any,
) -> QuicConfiguration:
    """Build a server side QUIC configuration using ``bundle`` as identity.

    ``alpn_protocols`` lists the application protocols the server offers.
    Extra keyword arguments are passed on to QuicConfiguration.
    """
    configuration = QuicConfiguration(
        alpn_protocols=list(alpn_protocols),
        is_client=False,
        **kwargs,
    )
    # same objects load_cert_chain() would produce, without the files
    configuration.certificate = bundle.x509_certificate()
    configuration.private_key = bundle.private_key
    logger.debug(
        "QUIC configuration for %s (alpn %s)",
        configuration.certificate.subject.rfc4514_string(),
        ", ".join(configuration.alpn_protocols),
    )
    return configuration


def server_ssl_context(bundle: SelfSignedCertificate) -> ssl.SSLContext:
    """Create a TLS server context serving ``bundle``.

    SSLContext only loads identities from files, so the PEM material goes
    through a private temporary directory that is gone once this returns.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    with tempfile.TemporaryDirectory(prefix="autotls-") as directory:
        cert_path = os.path.join(directory, "cert.pem")
        key_path = os.path.join(directory, "key.pem")
        with open(cert_path, "wb") as f:
            f.write(bundle.certificate_pem())
        # the directory is already 0700, keep the key file private too
        fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(bundle.private_key_pem())
        context.load_cert_chain(cert_path, key_path)
    logger.debug("TLS server context loaded, fingerprint %s", bundle.fingerprint().hex())
    return context


def client_ssl_context(bundle: SelfSignedCertificate) -> ssl.SSLContext:
    """Create a TLS client context that trusts only ``bundle``'s certificate."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.load_verify_locations(cadata=bundle.certificate_pem().decode("ascii"))
    return context
