# filecipher/utils.py
import getpass
import hashlib
import os
import re
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional, Dict

import psutil
from tqdm import tqdm
from zxcvbn import zxcvbn

from .crypto import KEY_SIZE, InvalidKeyEncoding, validate_key

# --- Constants ---
CHUNK_SIZE_KB_DEFAULT = 4096
WEAK_KEY_SCORE = 3

def is_debug(config: Dict) -> bool:
    return config.get('debug_mode', 'no').lower() == 'yes'

# --- Hashing ---
def calculate_hash(file_path: Path, config: Dict, algorithm: str = 'sha256', show_progress: bool = True) -> Optional[str]:
    """Calculates the hash of a file in chunks, with a progress bar and debug stats."""
    debug = is_debug(config)
    chunk_size = int(config.get('chunk_size_kb', CHUNK_SIZE_KB_DEFAULT)) * 1024
    use_ascii = config.get('progress_bar_style', 'unicode').lower() == 'ascii'
    hasher = hashlib.new(algorithm)
    last_update_time = 0.0
    try:
        file_size = file_path.stat().st_size
        with file_path.open('rb') as f:
            iterable = iter(lambda: f.read(chunk_size), b'')
            if show_progress:
                with tqdm(total=file_size, unit='B', unit_scale=True, desc=f"Hashing {file_path.name}", leave=False, ascii=use_ascii) as pbar:
                    for chunk in iterable:
                        hasher.update(chunk)
                        pbar.update(len(chunk))
                        if debug and (time.time() - last_update_time > 0.5):
                            pbar.set_postfix_str(f"CPU: {psutil.cpu_percent()}% | RAM: {psutil.virtual_memory().percent}%")
                            last_update_time = time.time()
            else:
                for chunk in iterable: hasher.update(chunk)
        return hasher.hexdigest()
    except (FileNotFoundError, PermissionError) as e:
        print(f"Error calculating hash: {e}")
        return None

# --- Keys ---
def encode_key(text: str, config: Dict) -> bytes:
    """Turns a typed key into raw bytes. The byte length is checked, not the character count."""
    encoding = config.get('key_encoding', 'utf-8')
    try:
        key = text.encode(encoding)
    except (UnicodeEncodeError, LookupError) as e:
        raise InvalidKeyEncoding(f"Key cannot be encoded as '{encoding}': {e}") from e
    validate_key(key)
    return key

def read_key(config: Dict, prompt_message: str = f"Enter the {KEY_SIZE}-byte key: ") -> bytes:
    """Prompts for a key without echo. Raises InvalidKeyLength or InvalidKeyEncoding."""
    text = getpass.getpass(prompt_message)
    key = encode_key(text, config)
    if config.get('warn_weak_keys', 'yes').lower() == 'yes' and not is_debug(config):
        strength = zxcvbn(text)
        if strength['score'] < WEAK_KEY_SCORE:
            print(f"⚠️  This key is easy to guess (Score: {strength['score']}/4).")
            if feedback := strength['feedback']['warning']: print(f"   Hint: {feedback}")
    return key

# --- Helper Functions ---
def prompt_path(label: str, default: str = "") -> Path:
    answer = input(f"{label} [{default}]: " if default else f"{label}: ").strip()
    return Path(answer or default)

def parse_size_string(size_str: str) -> Optional[int]:
    """Parses a size string like '50MB', '1.5GB' into bytes."""
    size_str = size_str.lower().strip()
    match = re.match(r'^(\d+\.?\d*)\s*([kmg]?b?)$', size_str)
    if not match:
        return None
    value_str, unit = match.groups()
    if unit.startswith('g'):
        multiplier = 1024**3
    elif unit.startswith('m'):
        multiplier = 1024**2
    elif unit.startswith('k'):
        multiplier = 1024
    else: # Assumes bytes if no unit
        multiplier = 1
    return int(float(value_str) * multiplier)

def format_duration(seconds: float) -> str:
    if seconds < 60: return f"{seconds:.2f} seconds"
    minutes, seconds = divmod(seconds, 60)
    return f"{int(minutes)} minute(s) and {seconds:.2f} seconds"

def open_file_in_editor(file_path: Path) -> None:
    print(f"Attempting to open '{file_path}' with the default system editor...")
    try:
        if sys.platform == "win32": os.startfile(file_path)
        elif sys.platform == "darwin": subprocess.run(['open', file_path], check=True)
        else: subprocess.run(['xdg-open', file_path], check=True)
        print("Editor launched. The script will continue after you close the editor.")
    except (FileNotFoundError, subprocess.CalledProcessError):
        print(f"❌ Could not open the file. Please open '{file_path}' manually.")

def get_title_suffix(config: Dict) -> str:
    return " [DEBUG]" if is_debug(config) else ""
