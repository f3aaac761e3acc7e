# filecipher/core.py
import logging
import os
import random
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from . import crypto
from . import utils

logger = logging.getLogger(__name__)

# --- File I/O boundary ---
def _read_bytes(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise crypto.IoFailure(f"Could not read '{path}': {e}") from e

def _write_bytes(path: Path, data: bytes) -> None:
    path = Path(path)
    try:
        with path.open('wb') as f:
            f.write(data)
    except OSError as e:
        if path.exists():
            try:
                path.unlink()
                logger.warning("Removed partial output file %s", path)
            except OSError as cleanup_error:
                logger.error("Failed to remove partial output file %s: %s", path, cleanup_error)
        raise crypto.IoFailure(f"Could not write '{path}': {e}") from e

def seal_file(input_path: Path, output_path: Path, key: bytes) -> List[str]:
    """Encrypts input_path into an IV || ciphertext container at output_path."""
    crypto.validate_key(key)
    data = _read_bytes(input_path)
    container, trail = crypto.seal(data, key, source=str(input_path), target=str(output_path))
    _write_bytes(output_path, container)
    logger.info("Sealed %s (%d bytes) into %s (%d bytes)", input_path, len(data), output_path, len(container))
    return trail

def open_file(input_path: Path, output_path: Path, key: bytes) -> List[str]:
    """Decrypts the container at input_path and writes the plaintext to output_path."""
    crypto.validate_key(key)
    container = _read_bytes(input_path)
    plaintext, trail = crypto.open_container(container, key, source=str(input_path), target=str(output_path))
    _write_bytes(output_path, plaintext)
    logger.info("Opened %s into %s (%d bytes)", input_path, output_path, len(plaintext))
    return trail

# --- Metadata ---
@dataclass
class ContainerInfo:
    path: Path
    total_size: int
    iv_hex: str
    ciphertext_size: int

    @property
    def block_aligned(self) -> bool:
        return self.ciphertext_size > 0 and self.ciphertext_size % crypto.BLOCK_SIZE == 0

    @property
    def plaintext_range(self) -> Optional[tuple]:
        """Smallest and largest plaintext length this ciphertext can hold."""
        if not self.block_aligned:
            return None
        return self.ciphertext_size - crypto.BLOCK_SIZE, self.ciphertext_size - 1

def read_container_metadata(file_path: Path) -> ContainerInfo:
    data = _read_bytes(file_path)
    if len(data) < crypto.MIN_CONTAINER_SIZE:
        raise crypto.MalformedContainer(
            f"'{file_path}' is {len(data)} bytes, too short to hold the {crypto.IV_SIZE}-byte IV.")
    return ContainerInfo(
        path=Path(file_path),
        total_size=len(data),
        iv_hex=data[:crypto.IV_SIZE].hex(),
        ciphertext_size=len(data) - crypto.IV_SIZE,
    )

def print_container_metadata(info: ContainerInfo) -> None:
    print("\n--- Container Metadata Analysis ---")
    print(f"  File: {info.path.name}\n  Total Size: {info.total_size} bytes")
    print("-" * 20)
    print(f"  IV (hex): {info.iv_hex}\n  Ciphertext Size: {info.ciphertext_size} bytes")
    if info.plaintext_range:
        low, high = info.plaintext_range
        print(f"  Block aligned: yes\n  Plaintext length: {low}..{high} bytes")
    else:
        print(f"  Block aligned: NO (not a valid container, ciphertext must be a positive multiple of {crypto.BLOCK_SIZE})")
    print("-----------------------------------")

# --- Self Test ---
def remove_directory_robustly(dir_path: Path, max_retries: int = 3, delay: float = 1.0) -> bool:
    """Tries to remove a directory, retrying on PermissionError."""
    for i in range(max_retries):
        try:
            shutil.rmtree(dir_path)
            return True
        except OSError as e:
            print(f"Attempt {i+1}/{max_retries} to remove '{dir_path}' failed: {e}")
            if i < max_retries - 1:
                time.sleep(delay)
    print(f"❌ Failed to remove directory '{dir_path}' after {max_retries} attempts. Please remove it manually.")
    return False

def create_test_files(target_dir: Path, num_files: int, min_size: int, max_size: int, config: Dict) -> Dict[str, str]:
    """Creates random files for the self test and returns a name -> SHA-256 dictionary."""
    original_hashes = {}
    # Always include an empty file and one exactly on a block boundary.
    sizes = [0, crypto.BLOCK_SIZE] + [random.randint(min_size, max_size) for _ in range(num_files)]
    for i, size in enumerate(sizes):
        file_path = target_dir / f"test_file_{i+1}.bin"
        file_path.write_bytes(os.urandom(size))
        original_hashes[file_path.name] = utils.calculate_hash(file_path, config, show_progress=False)
    return original_hashes

def run_self_test(config: Dict, work_dir: Path = Path('./self_test')) -> bool:
    """Seals and opens random files with random keys and checks hashes and container sizes."""
    min_size = utils.parse_size_string(config.get('test_min_size', '1KB')) or 0
    max_size = utils.parse_size_string(config.get('test_max_size', '1MB')) or min_size
    num_files = int(config.get('test_file_count', 3))
    use_ascii = config.get('progress_bar_style', 'unicode').lower() == 'ascii'

    if work_dir.exists() and not remove_directory_robustly(work_dir):
        return False
    original_dir, sealed_dir, opened_dir = work_dir / "original", work_dir / "sealed", work_dir / "opened"
    for d in (original_dir, sealed_dir, opened_dir): d.mkdir(parents=True)

    passed = True
    try:
        hashes = create_test_files(original_dir, num_files, min_size, max(min_size, max_size), config)
        for name, original_hash in tqdm(sorted(hashes.items()), desc="Self test", leave=False, ascii=use_ascii):
            key = os.urandom(crypto.KEY_SIZE)
            source = original_dir / name
            sealed, opened = sealed_dir / f"{name}.enc", opened_dir / name
            try:
                seal_file(source, sealed, key)
                open_file(sealed, opened, key)
            except crypto.CipherError as e:
                print(f"  [FAIL] {name}: {e}")
                passed = False
                continue
            size_ok = sealed.stat().st_size == crypto.sealed_size(source.stat().st_size)
            hash_ok = utils.calculate_hash(opened, config, show_progress=False) == original_hash
            if size_ok and hash_ok:
                print(f"  [PASS] {name} ({source.stat().st_size} -> {sealed.stat().st_size} bytes)")
            else:
                print(f"  [FAIL] {name}: {'hash mismatch' if not hash_ok else 'unexpected container size'}")
                passed = False
    finally:
        remove_directory_robustly(work_dir)
    return passed
