#!/usr/bin/env python3
"""
CLI entry point for composing test configurations.

Lists the available capabilities, renders profiles into runnable
configurations and inspects saved capability sets.
"""

import argparse
import sys
from pathlib import Path

from harness.capabilities.base import PermutationLayer
from harness.capabilities.bootstrap import get_capability_registry
from harness.composition.capability_set import CompositionSet
from harness.composition.codec import CapabilityCodecError
from harness.composition.runnable import CompositionError, build_runnable_configuration
from harness.logger import UnifiedLogger
from harness.runtime.config import HarnessConfig
from harness.runtime.host import LocalHost
from harness.settings import SettingsError
from harness.settings.profiles import build_named_profile, load_profiles

logger = UnifiedLogger(tag="harness-cli")


class _FixedHost(LocalHost):
    """Local host that reports a chosen platform for rendering."""

    def __init__(self, windows: bool):
        self._windows = windows

    def path_separator(self) -> str:
        return ";" if self._windows else ":"

    def is_windows_host(self) -> bool:
        return self._windows


def list_capabilities(args):
    """List registered capabilities grouped by category."""
    registry = get_capability_registry()

    print("=== AVAILABLE CAPABILITIES ===")
    for category, classes in registry.get_capabilities_by_category().items():
        print(f"\n📂 {category.value}")
        for capability_cls in classes:
            capability = capability_cls()
            markers = []
            if registry.is_default(capability_cls.type_name()):
                markers.append("default")
            if not capability.is_implemented():
                markers.append("not implemented")
            suffix = f" ({', '.join(markers)})" if markers else ""
            print(f"   • {capability_cls.type_name()} - {capability.name()}{suffix}")

    print("\n=== PROFILES ===")
    for name, profile in load_profiles().profiles.items():
        print(f"   • {name}: {profile.description or ''}")


def compose_profile(args):
    """Render a profile into CLI arguments and directive text."""
    config = HarnessConfig.for_local(extension_dir=args.extension_dir, layer=args.layer)
    if args.windows is not None:
        config.host = _FixedHost(args.windows)

    try:
        composition, directives = build_named_profile(args.profile)
        configuration = build_runnable_configuration(composition, directives, config.capability_context())
    except (SettingsError, CompositionError) as exc:
        logger.error("Cannot compose profile", profile=args.profile, error=str(exc))
        print(f"❌ {exc}")
        sys.exit(1)

    print(f"=== {args.profile}: {configuration.short_name or '(defaults)'} ===")
    print("\nCommand line:")
    print(configuration.cli_args.strip())
    print("\nDirectives:")
    print(configuration.directive_text, end="")

    if args.xml:
        print("\nCapability set:")
        print(composition.serialize(), end="")

    if args.output:
        path = configuration.write_directive_file(Path(args.output))
        print(f"\n✅ Directive file written to {path}")


def parse_set(args):
    """Parse a saved capability set and describe it."""
    try:
        with open(args.file, "rb") as handle:
            composition = CompositionSet.parse(handle)
    except (OSError, CapabilityCodecError) as exc:
        print(f"❌ {exc}")
        sys.exit(1)

    print(f"=== {args.file} ===")
    for capability in composition:
        print(f"   • {capability.category.value}: {capability.name()}")

    missing = composition.missing_categories()
    if missing:
        print(f"\n⚠️  Missing (defaults would be used): {', '.join(category.value for category in missing)}")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compose interpreter test configurations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  harness list                              # Capabilities and profiles
  harness compose opcache --extension-dir /usr/lib/php/ext
  harness compose web --windows --xml       # Render for a Windows host
  harness parse saved_set.xml
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('list', help='List capabilities and profiles')

    compose_parser = subparsers.add_parser('compose', help='Render a profile')
    compose_parser.add_argument('profile', help='Profile name from profiles.yaml')
    platform_group = compose_parser.add_mutually_exclusive_group()
    platform_group.add_argument('--windows', dest='windows', action='store_true', default=None,
                                help='Render for a Windows host')
    platform_group.add_argument('--posix', dest='windows', action='store_false',
                                help='Render for a POSIX host')
    compose_parser.add_argument('--layer', default=PermutationLayer.CORE.value,
                                choices=[layer.value for layer in PermutationLayer])
    compose_parser.add_argument('--extension-dir', help='Extension directory of the build')
    compose_parser.add_argument('--xml', action='store_true', help='Also print the capability set XML')
    compose_parser.add_argument('--output', help='Write the directive file here')

    parse_parser = subparsers.add_parser('parse', help='Describe a saved capability set')
    parse_parser.add_argument('file', help='Capability set XML file')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == 'list':
        list_capabilities(args)
    elif args.command == 'compose':
        compose_profile(args)
    elif args.command == 'parse':
        parse_set(args)


if __name__ == "__main__":
    main()
