"""Loading and generating the PEM-encoded RSA signing material."""

from __future__ import annotations

from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sessionauth.core.config import TokenConfig
from sessionauth.services._shared.ports import SigningMaterial, SigningMaterialError


def _read(path: str | Path, what: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise SigningMaterialError(f"could not read {what} pem file: {path}") from exc


def load_pem_signing_material(
    private_key_path: str | Path,
    public_key_path: str | Path,
    refresh_secret: str,
) -> SigningMaterial:
    """
    Read and parse the RSA key pair and bundle it with the refresh secret.

    :raises SigningMaterialError: When a file is missing, a key cannot be
        parsed, a key is not RSA, or the public key does not match the
        private key.
    """
    try:
        private_key = serialization.load_pem_private_key(
            _read(private_key_path, "private key"), password=None
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SigningMaterialError("could not parse private key") from exc

    try:
        public_key = serialization.load_pem_public_key(_read(public_key_path, "public key"))
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise SigningMaterialError("could not parse public key") from exc

    if not isinstance(private_key, rsa.RSAPrivateKey) or not isinstance(
        public_key, rsa.RSAPublicKey
    ):
        raise SigningMaterialError("identity token keys must be RSA")
    if private_key.public_key().public_numbers() != public_key.public_numbers():
        raise SigningMaterialError("public key does not match private key")

    return SigningMaterial(
        private_key=private_key,
        public_key=public_key,
        refresh_secret=refresh_secret,
    )


def load_from_config(cfg: TokenConfig) -> SigningMaterial:
    return load_pem_signing_material(cfg.private_key_path, cfg.public_key_path, cfg.refresh_secret)


def generate_rsa_keypair(key_size: int = 2048) -> tuple[bytes, bytes]:
    """
    Generate an RSA key pair.

    :returns: ``(private_pem, public_pem)``; private key in unencrypted PKCS8,
        public key as SubjectPublicKeyInfo.
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


def write_rsa_keypair(directory: str | Path, key_size: int = 2048) -> tuple[Path, Path]:
    """Write ``rsa_private.pem`` / ``rsa_public.pem`` into ``directory``."""
    out = Path(directory)
    out.mkdir(parents=True, exist_ok=True)
    private_pem, public_pem = generate_rsa_keypair(key_size)
    priv_path = out / "rsa_private.pem"
    pub_path = out / "rsa_public.pem"
    priv_path.write_bytes(private_pem)
    priv_path.chmod(0o600)
    pub_path.write_bytes(public_pem)
    return priv_path, pub_path
