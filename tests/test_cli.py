import hashlib
import logging

import pytest

from conftest import SERVER_KEY, build_ca, build_license_cert, cert_pem, key_pem
from hudson_license import cli, colors
from hudson_license import logger as logger_module


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch):
    monkeypatch.setattr(cli, "get_logger", lambda: logging.getLogger("hudson_license.cli"))


@pytest.fixture
def files(tmp_path, license_key, license_cert, ca_cert):
    paths = {
        "key": tmp_path / "license.key",
        "cert": tmp_path / "license.crt",
        "ca": tmp_path / "ca.pem",
    }
    paths["key"].write_text(key_pem(license_key))
    paths["cert"].write_text(cert_pem(license_cert))
    paths["ca"].write_text(cert_pem(ca_cert))
    return {name: str(path) for name, path in paths.items()}


def _args(files, *extra):
    return ["-k", files["key"], "-c", files["cert"], "--ca", files["ca"], *extra]


def test_valid_license(files, capsys):
    assert cli.main(_args(files, "--server-key", SERVER_KEY)) == 0
    out = capsys.readouterr().out
    assert "License is valid" in out
    assert "Acme Corp" in out
    assert "Executors:    10" in out


def test_other_server(files, capsys):
    assert cli.main(_args(files, "--server-key", "XYZ")) == 1
    assert "belongs to another server" in capsys.readouterr().out


def test_secret_file(files, tmp_path, capsys):
    secret = tmp_path / "secret.key"
    secret.write_text("s3cr3t")
    # the license is bound to SERVER_KEY, not to the hash of this secret
    assert hashlib.sha256(b"s3cr3t").hexdigest() != SERVER_KEY
    assert cli.main(_args(files, "--secret-file", str(secret))) == 1
    assert "belongs to another server" in capsys.readouterr().out


def test_secret_file_bound_license(tmp_path, license_key, ca_cert, ca_key, capsys):
    secret = tmp_path / "secret.key"
    secret.write_text("s3cr3t")
    server_key = hashlib.sha256(b"s3cr3t").hexdigest()
    cert = build_license_cert(license_key, ca_cert, ca_key,
                              organization=f"Hudson Customer:executors=2,serverKey={server_key}")
    (tmp_path / "k.pem").write_text(key_pem(license_key))
    (tmp_path / "c.pem").write_text(cert_pem(cert))
    (tmp_path / "ca.pem").write_text(cert_pem(ca_cert))

    code = cli.main(["-k", str(tmp_path / "k.pem"), "-c", str(tmp_path / "c.pem"),
                     "--ca", str(tmp_path / "ca.pem"), "--secret-file", str(secret)])
    assert code == 0
    assert "Executors:    2" in capsys.readouterr().out


def test_untrusted_ca(files, other_key, capsys, tmp_path):
    rogue = tmp_path / "rogue.pem"
    rogue.write_text(cert_pem(build_ca(other_key)))
    files["ca"] = str(rogue)
    assert cli.main(_args(files, "--server-key", SERVER_KEY)) == 1
    assert "Invalid CA in the license key" in capsys.readouterr().out


def test_missing_file(files, capsys):
    files["key"] = files["key"] + ".missing"
    assert cli.main(_args(files, "--server-key", SERVER_KEY)) == 1
    assert "Error:" in capsys.readouterr().out


def test_identity_is_required(files):
    with pytest.raises(SystemExit):
        cli.main(_args(files))


def test_identity_options_are_exclusive(files):
    with pytest.raises(SystemExit):
        cli.main(_args(files, "--server-key", SERVER_KEY, "--secret-file", "x"))


def test_verbose_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        logger_module.set_verbose_mode(True)
        logger = logger_module.get_logger()
        assert logger.level == logging.DEBUG
        assert [h.level for h in logger.handlers] == [logging.DEBUG]

        logger_module.set_verbose_mode(False)
        logger = logger_module.get_logger()
        assert logger.level == logging.INFO
        assert [h.level for h in logger.handlers] == [logging.INFO]
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        logger_module.set_verbose_mode(False)


class FakeTerminal:

    def isatty(self):
        return True


def test_verdict_without_terminal(capsys):
    assert colors.verdict(True, "License is valid") == "✓ License is valid"
    assert colors.verdict(False, "License expired") == "✗ License expired"


def test_verdict_on_terminal(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr(colors.os, "name", "posix")
    line = colors.verdict(True, "ok", stream=FakeTerminal())
    assert line == f"{colors.GREEN}{colors.BOLD}✓ ok{colors.RESET}"
    assert colors.verdict(False, "no", stream=FakeTerminal()) == f"{colors.RED}✗ no{colors.RESET}"


def test_no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert colors.paint("text", colors.RED, stream=FakeTerminal()) == "text"
