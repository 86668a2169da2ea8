import json

from typer.testing import CliRunner

import storageiam
from storageiam.cli import __main__ as cli


def test_version(runner: CliRunner):
    res = runner.invoke(cli.app, ['version'], catch_exceptions=False)
    assert res.exit_code == 0
    assert res.stdout.strip() == storageiam.version()


def test_describe_short_name(runner: CliRunner):
    res = runner.invoke(cli.app, ['describe', 'my-bucket'], catch_exceptions=False)
    assert res.exit_code == 0
    assert res.stdout.splitlines() == [
        'b/my-bucket',
        'iam-storage-bucket-b/my-bucket',
        'storage bucket "b/my-bucket"',
    ]


def test_describe_long_name(runner: CliRunner):
    res = runner.invoke(cli.app, ['describe', 'b/my-bucket'], catch_exceptions=False)
    assert res.exit_code == 0
    assert res.stdout.splitlines()[0] == 'b/my-bucket'


def test_import(runner: CliRunner):
    res = runner.invoke(cli.app, ['import', 'my-bucket'], catch_exceptions=False)
    assert res.exit_code == 0
    assert res.stdout.strip() == 'b/my-bucket'


def test_import_bad_identifier(runner: CliRunner):
    res = runner.invoke(cli.app, ['import', 'projects/p/buckets/my-bucket'], catch_exceptions=False)
    assert res.exit_code == 1
    assert "doesn't match any of the accepted formats" in res.output


def test_set_policy_invalid_json(runner: CliRunner, tmp_path):
    policy_file = tmp_path / 'policy.json'
    policy_file.write_text('{"bindings": [')
    res = runner.invoke(cli.app, ['set-policy', 'my-bucket', str(policy_file)], catch_exceptions=False)
    assert res.exit_code == 1
    assert 'is not valid JSON' in res.output


def test_set_policy_unconvertible_policy(runner: CliRunner, tmp_path):
    policy_file = tmp_path / 'policy.json'
    policy_file.write_text(json.dumps({'bindings': 'roles/storage.admin'}))
    res = runner.invoke(
        cli.app,
        ['set-policy', 'my-bucket', str(policy_file), '--base-path', 'http://127.0.0.1:9/storage/v1/'],
        catch_exceptions=False,
    )
    assert res.exit_code == 1
    assert 'Cannot convert a policy to a resource manager policy' in res.output


def test_describe_bad_policy_version(runner: CliRunner, monkeypatch):
    monkeypatch.setenv('STORAGEIAM_IAM_POLICY_VERSION', 'three')
    res = runner.invoke(cli.app, ['describe', 'my-bucket'], catch_exceptions=False)
    assert res.exit_code == 1
    assert 'iam/policy_version must be an integer' in res.output


def test_get_policy_bad_policy_version(runner: CliRunner, monkeypatch):
    monkeypatch.setenv('STORAGEIAM_IAM_POLICY_VERSION', 'three')
    res = runner.invoke(cli.app, ['get-policy', 'my-bucket'], catch_exceptions=False)
    assert res.exit_code == 1
    assert 'iam/policy_version must be an integer' in res.output
    assert 'Traceback' not in res.output
