import pytest

from ledgerliveapi.device import DeviceBridge, use_device_bridge


class FakeDeviceBridge:
    def __init__(self, fail_close=False):
        self.exchanged = []
        self.closed = 0
        self.fail_close = fail_close

    async def exchange(self, apdu: bytes) -> bytes:
        self.exchanged.append(apdu)
        return b"\x01\x02\x90\x00"

    async def close(self) -> None:
        self.closed += 1
        if self.fail_close:
            raise OSError("device unplugged")


@pytest.mark.asyncio
async def test_bridge_is_closed_after_handler_returns():
    bridge = FakeDeviceBridge()

    async def _get_version(device):
        response = await device.exchange(b"\xb0\x01\x00\x00")
        return response[:-2]

    assert await use_device_bridge(bridge, _get_version) == b"\x01\x02"
    assert bridge.exchanged == [b"\xb0\x01\x00\x00"]
    assert bridge.closed == 1


@pytest.mark.asyncio
async def test_bridge_is_closed_when_handler_raises():
    bridge = FakeDeviceBridge()

    async def _boom(device):
        raise RuntimeError("status 6985")

    with pytest.raises(RuntimeError, match="6985"):
        await use_device_bridge(bridge, _boom)
    assert bridge.closed == 1


@pytest.mark.asyncio
async def test_close_failure_does_not_hide_the_result():
    bridge = FakeDeviceBridge(fail_close=True)

    async def _ok(device):
        return "done"

    assert await use_device_bridge(bridge, _ok) == "done"
    assert bridge.closed == 1


def test_fake_satisfies_protocol():
    assert isinstance(FakeDeviceBridge(), DeviceBridge)
