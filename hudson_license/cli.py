from hudson_license.colors import RED, paint, verdict
from hudson_license.errors import LicenseError
from hudson_license.identity import SecretFileHostIdentity, StaticHostIdentity
from hudson_license.license import LicenseValidator
from hudson_license.logger import set_verbose_mode, get_logger
from hudson_license.root_ca import FileRootCaSource

import argparse


def parse_arguments(argv=None):
    """Parse command line arguments using argparse."""
    parser = argparse.ArgumentParser(
        prog="validate-license",
        description="Validate a license key and certificate",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "-k", "--key",
        required=True,
        help="PEM file holding the license private key"
    )

    parser.add_argument(
        "-c", "--certificate",
        required=True,
        help="PEM file holding the license certificate"
    )

    parser.add_argument(
        "--ca",
        required=True,
        help="PEM file holding the license CA certificate"
    )

    identity = parser.add_mutually_exclusive_group(required=True)
    identity.add_argument(
        "--server-key",
        help="Identity hash of this installation"
    )
    identity.add_argument(
        "--secret-file",
        help="Secret key file the installation identity hash is derived from"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    return parser.parse_args(argv)


def read_text(path):
    with open(path, "r", encoding="ascii") as f:
        return f.read()


def main(argv=None):
    """Main entry point for the license validation tool."""
    args = parse_arguments(argv)

    set_verbose_mode(args.verbose)
    logger = get_logger()

    if args.secret_file:
        host_identity = SecretFileHostIdentity(args.secret_file)
    else:
        host_identity = StaticHostIdentity(args.server_key)

    logger.debug(f"Validating {args.key} / {args.certificate} against {args.ca}")

    try:
        validator = LicenseValidator(host_identity, FileRootCaSource(args.ca))
        lic = validator.validate(read_text(args.key), read_text(args.certificate))
    except LicenseError as e:
        if e.cause is not None:
            logger.debug(f"Caused by {type(e.cause).__name__}: {e.cause}")
        print(verdict(False, e.message))
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(paint(f"Error: {e}", RED))
        return 1

    print(verdict(True, "License is valid"))
    print(f"  Customer:     {lic.customer_name}")
    if lic.organizational_unit:
        print(f"  Unit:         {lic.organizational_unit}")
    print(f"  Executors:    {lic.executors_limit}")
    print(f"  Expires:      {lic.expiration_date_string}")
    return 0
