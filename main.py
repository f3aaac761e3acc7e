import configparser
import logging
import os
import sys
from pathlib import Path
from typing import Dict

from filecipher.cli import handle_file_menu, handle_config_menu, handle_debug_menu
from filecipher.session_log import SessionLog
from filecipher.utils import get_title_suffix

CONFIG_PATH = Path('config.ini')

DEFAULT_CONFIG_CONTENT = """
[Settings]
# Paths offered as defaults when encrypting or decrypting a file.
default_input_path = input.txt
default_output_path = encrypted.bin

# File the session log is written to from the Files menu.
log_file = input.log

# Level for diagnostic messages (DEBUG, INFO, WARNING, ERROR).
log_level = WARNING

# --- Key Settings ---

# Encoding used to turn the typed key into bytes. The result must be exactly 32 bytes.
key_encoding = utf-8

# Warn when a typed key is easy to guess (uses zxcvbn). Options: yes / no
warn_weak_keys = yes

# --- Performance Features ---

# Chunk size in Kilobytes for hashing files.
chunk_size_kb = 4096

# --- Self Test ---

# Number of random files (an empty file and a one-block file are always added).
test_file_count = 3
test_min_size = 1KB
test_max_size = 1MB

# --- Development Settings ---

# Enable debug mode to show the self test and system stats while hashing.
debug_mode = no

[UI]
# Style of the progress bar.
# Options: unicode (modern style: ███), ascii (compatible style: ###)
progress_bar_style = unicode
"""


def create_default_config(config_path: Path) -> None:
    """Creates a default config.ini file if it doesn't exist."""
    print(f"INFO: '{config_path.name}' not found. Creating a new one with default settings...")
    try:
        config_path.write_text(DEFAULT_CONFIG_CONTENT.strip(), encoding='utf-8')
        print(f"✅ Default '{config_path.name}' created successfully.")
    except (UnicodeEncodeError, PermissionError) as e:
        print(f"❌ Critical Error: Could not write to '{config_path}'. Error: {e}")
        sys.exit(1)


def load_config(config_path: Path) -> Dict[str, str]:
    """Reads config.ini and flattens all sections into one settings dictionary."""
    if not config_path.exists():
        create_default_config(config_path)
    config = configparser.ConfigParser(interpolation=None)
    config.read(config_path, encoding='utf-8')
    settings: Dict[str, str] = {}
    for section in config.sections():
        settings.update(dict(config.items(section)))
    return settings


def setup_logging(settings: Dict[str, str]) -> None:
    level = getattr(logging, settings.get('log_level', 'WARNING').upper(), logging.WARNING)
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')


def main() -> None:
    """Main function to run the application's menu loop."""
    session = SessionLog()
    logging_ready = False
    while True:
        try:
            settings = load_config(CONFIG_PATH)
        except configparser.Error as e:
            print(f"Error loading {CONFIG_PATH}: {e}")
            return
        if not logging_ready:
            setup_logging(settings)
            logging_ready = True

        title_suffix = get_title_suffix(settings)
        os.system('cls' if os.name == 'nt' else 'clear')
        print(f"🔒 File Encryptor / Decryptor (AES-256-CBC) - MAIN MENU 🔒{title_suffix}")
        print("=" * 45)
        print("  [1] Category: Files\n  [7] View/Edit Config\n  [8] Debug/Analysis Tools\n  [9] Exit Program")
        print("-" * 45)
        choice = input("Select a category: ")
        if choice == '1': handle_file_menu(settings, session)
        elif choice == '7': handle_config_menu(settings, CONFIG_PATH)
        elif choice == '8': handle_debug_menu(settings)
        elif choice == '9': print("Goodbye! 👋"); break
        else: print("Invalid selection."); input("\nPress Enter...")


def run() -> None:
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nProgram terminated by user. 👋"); sys.exit(0)
    except Exception as e:
        print(f"\n\nAn unexpected critical error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
