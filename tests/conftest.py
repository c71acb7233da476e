import pytest

# A complete payload as the monitoring agent delivers it
SAMPLE_PAYLOAD = {
    "reasonCode": "7003",
    "deviceID": "a1b2c3d4e5f6",
    "kernelInfo": "Linux localhost 5.15.94-android13",
    "sdkVersion": "34",
    "deviceModel": "SM-S911B",
    "externalID": "DeveloperOptionsEnabled",
    "fusedAppToken": "token-abc",
    "isProcReadable": "true",
    "reasonData": "Developer options are turned on",
    "buildHost": "21DJB7",
    "UUID": "5b0a8c3e-1111-4a3e-9d5f-0d2f6a7e8b9c",
    "carrierPlmn": "no data",
    "Arch": "arm64",
    "isAAB": "false",
    "UID": "10234",
    "deviceManufacturer": "samsung",
    "threatCode": "A7QJ3W",
    "sandboxPath": "/data/user/0/com.example.app",
    "osVersion": "14",
    "buildNumber": "UP1A.231005.007",
    "buildUser": "dpi",
    "message": "{app_display_name} detected developer options",
    "isSandboxPathWritable": "true",
    "defaultMessage": "{app_display_name} is not safe to use",
    "deviceBoard": "kalama",
    "basebandVersion": "S911BXXS3BWK5",
    "deviceBrand": "samsung",
    "timestamp": "1700000000",
}


@pytest.fixture
def make_payload():
    """Returns a factory building a fresh payload dict with overrides applied."""
    def _make(**overrides):
        payload = dict(SAMPLE_PAYLOAD)
        payload.update(overrides)
        return payload
    return _make
