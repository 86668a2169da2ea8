import logging
import sys
from typing import Annotated as Ann
from typing import Optional

import orjson
import typer
from rich.console import Console
from typer import Option as Opt

from storageiam.exceptions import IamError
from storageiam.iam import Policy, add_member, remove_member
from storageiam.iam.resource import DEFAULT_TIMEOUT_SECONDS
from storageiam.utils import async_to_blocking

from . import config as config_cli
from . import policy as ops

app = typer.Typer(
    help='Manage IAM policies of Cloud Storage buckets.',
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)
app.add_typer(config_cli.app)

errc = Console(stderr=True, soft_wrap=True)

CredentialsFileOption = Ann[Optional[str], Opt(help='Google credentials file.')]
BasePathOption = Ann[Optional[str], Opt(help='Base URL of the Cloud Storage JSON API.')]
TimeoutOption = Ann[float, Opt(help='Timeout for replacing a policy, in seconds.')]
LogLevelOption = Ann[str, Opt(help='Log level.')]


def _provider_config(credentials_file: Optional[str], base_path: Optional[str]):
    from storageiam.config.provider import ProviderConfig  # pylint: disable=import-outside-toplevel

    return ProviderConfig.from_user_config(credentials_file=credentials_file, storage_base_path=base_path)


def _configure_logging(log_level: str):
    from storageiam.iam_logging import configure_logging  # pylint: disable=import-outside-toplevel

    configure_logging(getattr(logging, log_level.upper(), logging.WARNING))


def _fail(error):
    errc.print(f'Error: {error}', markup=False, highlight=False)
    sys.exit(1)


def _run(coro):
    try:
        return async_to_blocking(coro)
    except (IamError, ValueError) as e:
        _fail(e)


def _print_policy(policy: Policy):
    print(orjson.dumps(policy.to_json(), option=orjson.OPT_INDENT_2).decode())


@app.command()
def version():
    '''Print version information and exit.'''
    import storageiam  # pylint: disable=import-outside-toplevel

    print(storageiam.version())


@app.command()
def describe(bucket: str):
    '''Print the resource id, mutex key and description of a bucket.'''
    try:
        u = ops.bucket_updater(_provider_config(None, None), bucket)
    except (IamError, ValueError) as e:
        _fail(e)
    print(u.resource_id())
    print(u.mutex_key())
    print(u.describe_resource())


@app.command(name='import')
def import_(identifier: str):
    '''Resolve an identifier to the canonical resource id.'''
    try:
        d = ops.import_bucket(_provider_config(None, None), identifier)
    except (IamError, ValueError) as e:
        _fail(e)
    print(d.id)


@app.command(name='get-policy')
def get_policy(
    bucket: str,
    credentials_file: CredentialsFileOption = None,
    base_path: BasePathOption = None,
    log_level: LogLevelOption = 'WARNING',
):
    '''Print the IAM policy of a bucket as JSON.'''
    _configure_logging(log_level)

    async def run():
        async with _provider_config(credentials_file, base_path) as config:
            return await ops.read_policy(config, bucket)

    _print_policy(_run(run()))


@app.command(name='set-policy')
def set_policy(
    bucket: str,
    policy_file: Ann[typer.FileBinaryRead, typer.Argument(help='JSON policy file, - for stdin.')],
    credentials_file: CredentialsFileOption = None,
    base_path: BasePathOption = None,
    timeout: TimeoutOption = DEFAULT_TIMEOUT_SECONDS,
    log_level: LogLevelOption = 'WARNING',
):
    '''Replace the IAM policy of a bucket with the contents of a JSON file.'''
    _configure_logging(log_level)
    try:
        data = orjson.loads(policy_file.read())
    except orjson.JSONDecodeError as e:
        _fail(f'{policy_file.name} is not valid JSON: {e}')

    async def run():
        policy = Policy.from_json(data)
        async with _provider_config(credentials_file, base_path) as config:
            await ops.write_policy(config, bucket, policy, create_timeout=timeout)

    _run(run())


@app.command(name='add-member')
def add_member_command(
    bucket: str,
    role: str,
    member: str,
    credentials_file: CredentialsFileOption = None,
    base_path: BasePathOption = None,
    timeout: TimeoutOption = DEFAULT_TIMEOUT_SECONDS,
    log_level: LogLevelOption = 'WARNING',
):
    '''Grant ROLE on a bucket to MEMBER, e.g. user:someone@example.com.'''
    _configure_logging(log_level)

    async def run():
        async with _provider_config(credentials_file, base_path) as config:
            return await ops.modify_policy(
                config, bucket, lambda p: add_member(p, role, member), create_timeout=timeout
            )

    _print_policy(_run(run()))


@app.command(name='remove-member')
def remove_member_command(
    bucket: str,
    role: str,
    member: str,
    credentials_file: CredentialsFileOption = None,
    base_path: BasePathOption = None,
    timeout: TimeoutOption = DEFAULT_TIMEOUT_SECONDS,
    log_level: LogLevelOption = 'WARNING',
):
    '''Revoke the unconditional grant of ROLE on a bucket from MEMBER.'''
    _configure_logging(log_level)

    async def run():
        async with _provider_config(credentials_file, base_path) as config:
            return await ops.modify_policy(
                config, bucket, lambda p: remove_member(p, role, member), create_timeout=timeout
            )

    _print_policy(_run(run()))


def main():
    app()


if __name__ == '__main__':
    main()
