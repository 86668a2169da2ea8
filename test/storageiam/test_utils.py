import asyncio

from storageiam.utils import async_to_blocking, first_extant_file


def test_first_extant_file(tmp_path):
    present = tmp_path / 'present.json'
    present.write_text('{}')
    assert first_extant_file(None, str(tmp_path / 'absent.json'), str(present)) == str(present)
    assert first_extant_file(None, str(tmp_path / 'absent.json')) is None
    assert first_extant_file(str(tmp_path)) is None


def test_async_to_blocking():
    async def f():
        await asyncio.sleep(0)
        return 5

    assert async_to_blocking(f()) == 5
