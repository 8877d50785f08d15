"""Hash acquisition through the Nix command-line tools.

``nix-prefetch-url`` downloads a source into the store (unpacking archives
first) and prints its hash in Nix's native base32 encoding; ``nix hash
to-sri`` re-encodes that hash as a subresource-integrity string. Both are
injected as plain callables so tests can run without a Nix installation.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Callable, Dict, List, Optional

from ..core.models import Integrity, SourceType
from ..errors import OracleError
from .source_config import SRI_HASH_TYPE
from .source_utils import resolve_nix_bin, resolve_prefetch_bin, sanitize_store_name

logger = logging.getLogger(__name__)

FetchOracle = Callable[[str, str, bool], str]
ConvertOracle = Callable[[str], str]


def _run_oracle(cmd: List[str]) -> str:
    """Run ``cmd`` with stderr inherited and return its stdout."""

    logger.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=None,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise OracleError(cmd[0], detail="executable not found") from exc
    if proc.returncode != 0:
        raise OracleError(cmd[0], returncode=proc.returncode)
    return proc.stdout


def prefetch_url(store_name: str, url: str, unpack: bool) -> str:
    """Default fetch oracle: ``nix-prefetch-url --name <name> [--unpack] <url>``."""

    cmd = [resolve_prefetch_bin(), "--name", store_name]
    if unpack:
        cmd.append("--unpack")
    cmd.append(url)
    return _run_oracle(cmd)


def hash_to_sri(native_hash: str) -> str:
    """Default convert oracle: ``nix hash to-sri --type sha256 <hash>``."""

    return _run_oracle([resolve_nix_bin(), "hash", "to-sri", "--type", SRI_HASH_TYPE, native_hash])


def oracle_binaries() -> Dict[str, str]:
    return {"prefetch": resolve_prefetch_bin(), "nix": resolve_nix_bin()}


def missing_oracles() -> List[str]:
    """Return the oracle executables that are not on ``PATH``."""

    return [binary for binary in oracle_binaries().values() if shutil.which(binary) is None]


def trim_trailing_newline(output: str) -> str:
    """Drop exactly one trailing ``\\n``; anything else is passed through."""

    return output[:-1] if output.endswith("\n") else output


def acquire_hash(
    url: str,
    source_type: SourceType,
    filename: Optional[str],
    *,
    fetch_oracle: Optional[FetchOracle] = None,
    convert_oracle: Optional[ConvertOracle] = None,
) -> Integrity:
    """Materialize ``url`` through the fetch oracle and return its SRI hash.

    Raises :class:`OracleError` when either tool fails and
    :class:`~nix_source.errors.MalformedHashError` when the converted output is
    not a valid integrity string.
    """

    fetch = fetch_oracle or prefetch_url
    convert = convert_oracle or hash_to_sri

    store_name = sanitize_store_name(filename)
    unpack = source_type is SourceType.ARCHIVE
    native = trim_trailing_newline(fetch(store_name, url, unpack))
    logger.debug("\tnative hash %r", native)

    sri = convert(native).strip()
    integrity = Integrity.parse(sri)
    logger.info("\t%s", integrity)
    return integrity


__all__ = [
    "ConvertOracle",
    "FetchOracle",
    "acquire_hash",
    "hash_to_sri",
    "missing_oracles",
    "oracle_binaries",
    "prefetch_url",
    "trim_trailing_newline",
]
