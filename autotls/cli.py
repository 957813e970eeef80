# This is the command line entry point.

import argparse
import logging
import sys
from typing import List, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from .certificate import SelfSignedCertificate, generate_self_signed_cert
from .errors import GenerationError, InvalidInputError

logger = logging.getLogger("autotls.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autotls",
        description="Generate a self-signed TLS server certificate valid for 24 hours",
    )
    parser.add_argument(
        "-n",
        "--common-name",
        type=str,
        default="",
        help="subject common name (defaults to localhost)",
    )
    parser.add_argument(
        "-i",
        "--ip",
        dest="ip_addresses",
        action="append",
        default=[],
        metavar="ADDRESS",
        help="IP address to put in the certificate, may be repeated "
        "(defaults to 127.0.0.1 and ::1)",
    )
    parser.add_argument(
        "--pem",
        action="store_true",
        help="print the certificate and private key in PEM format",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="increase logging verbosity"
    )
    return parser


def describe(bundle: SelfSignedCertificate) -> str:
    cert = bundle.x509_certificate()
    common_name = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value
    san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    addresses = san.value.get_values_for_type(x509.IPAddress)
    lines = [
        "Common name: %s" % common_name,
        "IP addresses: %s" % ", ".join(str(address) for address in addresses),
        "Not before: %s" % cert.not_valid_before_utc.isoformat(),
        "Not after: %s" % cert.not_valid_after_utc.isoformat(),
        "Serial: %x" % cert.serial_number,
        "SHA-256 fingerprint: %s" % bundle.fingerprint().hex(":"),
    ]
    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    logger.debug(
        "Generating certificate for %r %s",
        args.common_name,
        args.ip_addresses,
    )
    try:
        bundle = generate_self_signed_cert(args.common_name, args.ip_addresses)
    except InvalidInputError as exc:
        parser.error(str(exc))
    except GenerationError as exc:
        logger.error("Certificate generation failed: %s", exc)
        return 1

    if args.pem:
        sys.stdout.write(bundle.certificate_pem().decode("ascii"))
        sys.stdout.write(bundle.private_key_pem().decode("ascii"))
    else:
        sys.stdout.write(describe(bundle))
    logger.info("Generated certificate %s", bundle.fingerprint().hex())
    return 0
