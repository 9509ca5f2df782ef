#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from habit_app.config.loader import ConfigLoader
from habit_app.config.validation import ConfigValidator, ValidationError, normalize_settings


def validate_merged_config(loader: ConfigLoader, overrides: Optional[dict] = None) -> List[ValidationError]:
    """Validate the merged configuration with optional overrides."""
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def print_errors(errors: List[ValidationError]) -> None:
    print(f"❌ Found {len(errors)} validation errors:")
    for error in errors:
        print(f"  • {error.field}: {error.message} (value: {error.value})")


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating habit configuration in {loader.config_dir}...")

    all_valid = True

    try:
        errors = validate_merged_config(loader)
        if errors:
            print_errors(errors)
            all_valid = False
        else:
            print("✅ settings.yaml merged with defaults is valid")
    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        all_valid = False

    # Show what the planner will actually use
    print("\n📋 Effective notification settings...")
    try:
        settings = normalize_settings(loader.notification_settings(), loader.limit_params())
        for key, value in settings.to_dict().items():
            print(f"  • {key}: {value}")

        params = loader.escalation_params()
        print(f"  • escalation: every {params.interval_minutes} min until {params.day_end}")
    except ValueError as e:
        print(f"❌ Error building effective settings: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
