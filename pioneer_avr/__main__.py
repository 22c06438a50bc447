#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging
from signal import SIGINT, SIGTERM

from pioneer_avr.internal_types import *
from pioneer_avr import (
    __version__ as pkg_version,
    DEFAULT_PORT,
    PioneerAvrClient,
    PioneerAvrError,
    ReceiverModel,
    models,
    pioneer_avr_connect,
    PioneerAvrClientConfig,
    error_jsonable,
  )

DISCOVERY_TIMEOUT = 30.0
"""How long exec waits for input discovery before giving up, in seconds."""

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True
    _model: Optional[ReceiverModel] = None

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_emulator(self) -> int:
        bind_addr: str = self._args.bind
        port: int = self._args.port
        from pioneer_avr.emulator import PioneerAvrEmulator
        emulator = PioneerAvrEmulator(
            bind_addr=bind_addr,
            port=port,
            model=self._model,
          )
        def sigint_cleanup() -> None:
            emulator.close(CmdExitError(1, "Emulator terminated with SIGINT or SIGTERM"))
        loop = asyncio.get_running_loop()
        for signal in (SIGINT, SIGTERM):
            loop.add_signal_handler(signal, sigint_cleanup)
        try:
            await emulator.run()
        finally:
            for signal in (SIGINT, SIGTERM):
                loop.remove_signal_handler(signal)
        return 0

    async def _run_exec_command(self, client: PioneerAvrClient, cmd_name: str) -> JsonableDict:
        response_data: JsonableDict = dict(name=cmd_name)
        if cmd_name == "power_status":
            response_data["power"] = await client.power_status()
        elif cmd_name == "on":
            await client.power_on()
        elif cmd_name == "off":
            await client.power_off()
        elif cmd_name == "volume_status":
            response_data["volume"] = await client.volume_status()
        elif cmd_name == "mute_status":
            response_data["muted"] = await client.mute_status()
        elif cmd_name == "inputs":
            descriptors = await client.discover_inputs(timeout=DISCOVERY_TIMEOUT)
            response_data["inputs"] = [descriptor.to_jsonable() for descriptor in descriptors]
        elif cmd_name == "input_status":
            await client.discover_inputs(timeout=DISCOVERY_TIMEOUT)
            ordinal = await client.input_status()
            response_data["current_input"] = ordinal
            descriptor = None if ordinal is None else client.inputs.get(ordinal)
            if descriptor is not None:
                response_data["input"] = descriptor.to_jsonable()
        elif cmd_name.startswith("input="):
            await client.set_input(cmd_name[len("input="):])
        elif cmd_name.startswith("rename="):
            rename_arg = cmd_name[len("rename="):]
            input_id, sep, new_name = rename_arg.partition(':')
            if sep == '':
                raise PioneerAvrError(f"Rename requires <input-id>:<name>: {cmd_name!r}")
            await client.discover_inputs(timeout=DISCOVERY_TIMEOUT)
            response_data["new_name"] = await client.rename_input(input_id, new_name)
        else:
            raise PioneerAvrError(f"Unknown command: {cmd_name!r}")
        return response_data

    async def cmd_exec(self) -> int:
        continue_on_error: bool = self._args.continue_on_error
        config = PioneerAvrClientConfig(
            default_host=self._args.host,
            default_port=self._args.port,
            model=self._model,
            web_probe=False if self._args.no_web else None,
          )

        cmd_names = self._args.exec_command
        if len(cmd_names) == 0:
            raise CmdExitError(1, "No receiver commands specified")
        response_datas: List[JsonableDict] = []
        try:
            async with await pioneer_avr_connect(config=config) as client:
                await client.wait_web_probe()
                for cmd_name in cmd_names:
                    try:
                        response_data = await self._run_exec_command(client, cmd_name)
                    except Exception as exc:
                        response_datas.append(error_jsonable(exc, name=cmd_name))
                        if not continue_on_error:
                            raise
                    else:
                        response_datas.append(response_data)
        finally:
            print(json.dumps(response_datas, indent=2))
        return 0

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the pioneer-avr command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Control a Pioneer receiver.")

        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('--model', default=None,
                            choices=sorted(models.keys()),
                            help='''The receiver model, which determines the inputs probed. Default: VSX-1120K''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        # ======================= emulator

        parser_emulator = subparsers.add_parser('emulator', description="Run a receiver emulator for testing purposes.")
        parser_emulator.add_argument("--port", default=DEFAULT_PORT, type=int,
            help=f"Port number to listen on. Default: {DEFAULT_PORT}")
        parser_emulator.add_argument('-b', '--bind', default="0.0.0.0",
                            help='''The local unicast IP address to bind to. Default: 0.0.0.0.''')

        parser_emulator.set_defaults(func=self.cmd_emulator)

        # ======================= exec

        parser_exec = subparsers.add_parser('exec', description="Execute one or more commands on the receiver.")
        parser_exec.add_argument('--host', default=None,
                            help='''The receiver host address. Default: use env var PIONEER_AVR_HOST.''')
        parser_exec.add_argument("--port", default=None, type=int,
            help=f"Default receiver port number to connect to. Default: env var PIONEER_AVR_PORT, or {DEFAULT_PORT}")
        parser_exec.add_argument('--no-web', dest="no_web", action='store_true', default=False,
                            help='Do not probe the web interface; always use the telnet port. Default: False')
        parser_exec.add_argument('--continue', dest="continue_on_error", action='store_true', default=False,
                            help='Continue running commands on error. Default: False')
        parser_exec.add_argument('exec_command', nargs=argparse.REMAINDER,
                            help='''One or more commands to execute: power_status, on, off, volume_status, '''
                                 '''mute_status, inputs, input_status, input=<id>, rename=<id>:<name>.''')

        parser_exec.set_defaults(func=self.cmd_exec)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            if args.model is not None:
                self._model = models[args.model]
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            ex_desc = str(ex)
            if len(ex_desc) == 0:
                ex_desc = ex.__class__.__name__
            print(f"pioneer-avr: error: {ex_desc}", file=sys.stderr)
        except BaseException as ex:
            print(f"pioneer-avr: Unhandled exception {ex.__class__.__name__}: {ex}", file=sys.stderr)
            raise

        return rc

    def run(self) -> int:
        return asyncio.run(self.arun())

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
