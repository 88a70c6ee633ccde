#!/usr/bin/env python3
"""Verify a configuration file (and optionally a profile) before searching."""

import sys
from pathlib import Path

from jobsearch.config import ConfigurationError, load_profile, validate_config_file


def verify(config_path: Path, profile_path: Path = None) -> bool:
    ok = validate_config_file(config_path)

    if profile_path is not None:
        try:
            profile = load_profile(profile_path)
        except ConfigurationError as e:
            print(f"✗ Profile validation failed:\n{e}")
            return False
        print(f"✓ Profile {profile_path} is valid")
        print(f"  - {len(profile.experiences)} experiences")
        print(f"  - {len(profile.flattened_skills)} skills")
        print(f"  - {len(profile.degrees)} degrees")

    return ok


if __name__ == "__main__":
    config_arg = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    profile_arg = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    sys.exit(0 if verify(config_arg, profile_arg) else 1)
