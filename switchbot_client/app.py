#!/usr/bin/env python3
"""
SwitchBot Client Application
Command line access to device listing, device status and device commands
"""

import sys
import json
import logging
from .client import SwitchBotClient
from .config import resolve_api_url, resolve_credentials, save_api_url, get_api_url
from .errors import ConfigurationError, SwitchBotError
from .signing import compute_auth_headers


def output_json(data, exit_code=0):
    """Output data as JSON and exit"""
    print(json.dumps(data, indent=2))
    if exit_code != 0:
        sys.exit(exit_code)


def fail(message, json_output=False):
    """Report an error and exit with status 1"""
    if json_output:
        output_json({"success": False, "error": message}, exit_code=1)
    print(f"✗ {message}")
    sys.exit(1)


def has_json_flag():
    """Check if --json flag is present in command line arguments"""
    return '--json' in sys.argv


def parse_options(start_idx=2):
    """
    Parse global options and collect positional arguments

    Args:
        start_idx: Starting index in sys.argv to parse from

    Returns:
        Tuple of (options dict, list of positional arguments)
    """
    options = {
        "token": None,
        "secret": None,
        "api_url": None,
        "json": has_json_flag(),
        "verbose": False,
    }
    positionals = []

    i = start_idx
    while i < len(sys.argv):
        arg = sys.argv[i]
        if arg in ('--token', '--secret', '--api-url'):
            if i + 1 >= len(sys.argv):
                fail(f"Missing value for {arg}", options["json"])
            options[arg[2:].replace('-', '_')] = sys.argv[i + 1]
            i += 2
        elif arg == '--json':
            i += 1
        elif arg in ('-v', '--verbose'):
            options["verbose"] = True
            i += 1
        elif arg.startswith('--'):
            fail(f"Unknown option: {arg}", options["json"])
        else:
            positionals.append(arg)
            i += 1

    logging.basicConfig(
        level=logging.DEBUG if options["verbose"] else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    return options, positionals


def build_client(options):
    """Create a SwitchBotClient from options and environment"""
    try:
        token, secret = resolve_credentials(options["token"], options["secret"])
    except ConfigurationError as e:
        fail(str(e), options["json"])
    return SwitchBotClient(token, secret, api_url=resolve_api_url(options["api_url"]))


def call_api(options, operation, *args):
    """Run one client operation, turning client errors into CLI failures"""
    with build_client(options) as client:
        try:
            return getattr(client, operation)(*args)
        except (SwitchBotError, ValueError) as e:
            fail(str(e), options["json"])


def print_help():
    """Print help message"""
    print("SwitchBot Client - Device Control")
    print("\nCommands:")
    print("  devices                               # List devices and infrared remotes")
    print("  status <device_id>                    # Get device status")
    print("  command <device_id> <command> [param] # Send a command (param default: 'default')")
    print("  sign                                  # Print a fresh set of auth headers")
    print("  config                                # Show or save (--api-url) the API URL")
    print("\nGlobal Options:")
    print("  --token TOKEN            # Account token (default: $SWITCHBOT_TOKEN)")
    print("  --secret SECRET          # Account secret (default: $SWITCHBOT_SECRET)")
    print("  --api-url URL            # API URL (default: https://api.switch-bot.com)")
    print("  --json                   # Output results in JSON format")
    print("  --verbose                # Debug logging")
    print("\nEnvironment Variables:")
    print("  SWITCHBOT_TOKEN          # Account token")
    print("  SWITCHBOT_SECRET         # Account secret")
    print("  SWITCHBOT_API_URL        # Default API URL")
    print("\nExamples:")
    print("  python -m switchbot_client.app devices")
    print("  python -m switchbot_client.app status C271111EC0AB")
    print("  python -m switchbot_client.app command C271111EC0AB turnOn")
    print("  python -m switchbot_client.app command C271111EC0AB setColor 255:0:0")


def cmd_devices():
    """Handle devices command"""
    options, _ = parse_options()
    body = call_api(options, 'list_devices') or {}

    if options["json"]:
        output_json({"success": True, "body": body})
        return

    devices = body.get('deviceList', [])
    remotes = body.get('infraredRemoteList', [])
    print(f"✓ Found {len(devices)} device(s) and {len(remotes)} infrared remote(s)")
    for device in devices:
        print(f"  {device.get('deviceId')}  {device.get('deviceName')}  [{device.get('deviceType')}]")
    for remote in remotes:
        print(f"  {remote.get('deviceId')}  {remote.get('deviceName')}  [IR {remote.get('remoteType')}]")


def cmd_status():
    """Handle status command"""
    options, args = parse_options()
    if len(args) < 1:
        print("Error: status command requires a device id")
        print("Usage: python -m switchbot_client.app status <device_id> [options]")
        sys.exit(1)

    device_id = args[0]
    body = call_api(options, 'get_device_status', device_id)

    if options["json"]:
        output_json({"success": True, "device_id": device_id, "body": body})
        return

    print(f"✓ Status of {device_id}")
    for key, value in (body or {}).items():
        print(f"  {key}: {value}")


def cmd_command():
    """Handle command command"""
    options, args = parse_options()
    if len(args) < 2:
        print("Error: command requires a device id and a command name")
        print("Usage: python -m switchbot_client.app command <device_id> <command> [parameter] [options]")
        sys.exit(1)

    device_id, command = args[0], args[1]
    parameter = args[2] if len(args) > 2 else "default"
    body = call_api(options, 'set_device_status', device_id, command, parameter)

    if options["json"]:
        output_json({
            "success": True,
            "device_id": device_id,
            "command": command,
            "parameter": parameter,
            "body": body
        })
        return

    print(f"✓ Sent '{command}' ({parameter}) to {device_id}")
    if body:
        print(f"  Response: {json.dumps(body)}")


def cmd_sign():
    """Handle sign command - print headers usable with curl"""
    options, _ = parse_options()
    try:
        token, secret = resolve_credentials(options["token"], options["secret"])
    except ConfigurationError as e:
        fail(str(e), options["json"])

    headers = {"Authorization": token, **compute_auth_headers(token, secret)}

    if options["json"]:
        output_json(headers)
        return

    for name, value in headers.items():
        print(f"{name}: {value}")


def cmd_config():
    """Handle config command"""
    options, _ = parse_options()
    if options["api_url"]:
        save_api_url(options["api_url"])

    data = {
        "api_url": resolve_api_url(options["api_url"]),
        "saved_api_url": get_api_url(),
    }
    if options["json"]:
        output_json(data)
        return

    print(f"API URL: {data['api_url']}")
    if data["saved_api_url"]:
        print(f"  Saved in .switchbot: {data['saved_api_url']}")


def main():
    """Main entry point for the client app"""
    if len(sys.argv) == 1 or sys.argv[1] in ['-h', '--help', 'help']:
        print_help()
        return

    command = sys.argv[1]

    if command in ('devices', 'list-devices', 'list'):
        cmd_devices()
    elif command in ('status', 'device-status'):
        cmd_status()
    elif command in ('command', 'send-command'):
        cmd_command()
    elif command == 'sign':
        cmd_sign()
    elif command == 'config':
        cmd_config()
    else:
        print(f"Error: Unknown command: {command}")
        print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
