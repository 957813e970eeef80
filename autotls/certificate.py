# Self-signed certificate generation.

import datetime
import ipaddress
from typing import List, NamedTuple, Optional, Sequence, Union

from cryptography import x509
from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from .errors import GenerationError, InvalidInputError

ParsedAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

DEFAULT_COMMON_NAME = "localhost"
DEFAULT_IPS = ("127.0.0.1", "::1")

KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537
VALIDITY = datetime.timedelta(hours=24)

# errors cryptography raises for bad parameters or backend failures
_BACKEND_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm, InternalError)


class SelfSignedCertificate(NamedTuple):
    """A DER encoded self-signed certificate and the key that signed it.

    Unpacks as ``(certificate, private_key)``.
    """

    certificate: bytes
    private_key: rsa.RSAPrivateKey

    @property
    def chain(self) -> List[bytes]:
        return [self.certificate]

    def x509_certificate(self) -> x509.Certificate:
        return x509.load_der_x509_certificate(self.certificate)

    def certificate_pem(self) -> bytes:
        return self.x509_certificate().public_bytes(serialization.Encoding.PEM)

    def private_key_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def fingerprint(self) -> bytes:
        return self.x509_certificate().fingerprint(hashes.SHA256())


def parse_ip_addresses(ip_addresses: Sequence[str]) -> List[ParsedAddress]:
    """Parse IP literals, keeping their order.

    Raises InvalidInputError for the first string that is not an IPv4 or
    IPv6 address, or that carries an IPv6 zone a certificate cannot hold.
    """
    parsed = []
    for index, value in enumerate(ip_addresses):
        try:
            parsed.append(ipaddress.ip_address(value))
        except ValueError as exc:
            raise InvalidInputError(
                "invalid IP address %r at position %d" % (value, index)
            ) from exc
        if getattr(parsed[-1], "scope_id", None):
            raise InvalidInputError(
                "invalid IP address %r at position %d: scoped addresses are not allowed"
                % (value, index)
            )
    return parsed


def generate_self_signed_cert(
    common_name: str = "",
    ip_addresses: Optional[Sequence[str]] = None,
) -> SelfSignedCertificate:
    """Generate a self-signed TLS server certificate valid for 24 hours.

    An empty ``common_name`` becomes ``"localhost"`` and an empty or missing
    ``ip_addresses`` becomes ``("127.0.0.1", "::1")``. Every address ends up
    as an IP subject alternative name, in the given order.
    """
    if not common_name:
        common_name = DEFAULT_COMMON_NAME
    if not ip_addresses:
        ip_addresses = DEFAULT_IPS

    # validate before spending time on the key
    addresses = parse_ip_addresses(ip_addresses)
    try:
        subject = issuer = x509.Name(
            [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
        )
    except ValueError as exc:
        # e.g. longer than the 64 characters X.509 allows
        raise InvalidInputError(
            "invalid common name %r: %s" % (common_name, exc)
        ) from exc

    try:
        private_key = rsa.generate_private_key(
            public_exponent=PUBLIC_EXPONENT,
            key_size=KEY_SIZE,
        )
    except _BACKEND_ERRORS as exc:
        raise GenerationError("failed to generate RSA key: %s" % exc) from exc

    # certificates only carry whole seconds
    now = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)

    try:
        cert = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer)
            .public_key(private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + VALIDITY)
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]),
                critical=False,
            )
            .add_extension(
                x509.SubjectAlternativeName(
                    [x509.IPAddress(address) for address in addresses]
                ),
                critical=False,
            )
            .sign(private_key, hashes.SHA256())
        )
        der = cert.public_bytes(serialization.Encoding.DER)
    except _BACKEND_ERRORS as exc:
        raise GenerationError("failed to sign certificate: %s" % exc) from exc

    return SelfSignedCertificate(certificate=der, private_key=private_key)
