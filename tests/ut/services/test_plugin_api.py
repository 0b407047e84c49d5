"""PluginAddressResolver 单元测试"""

from __future__ import annotations

import json

import pytest

from provisioner.core.exceptions import AddressResolutionError, ValidationError
from provisioner.services.plugin_api import PluginAddressResolver


class TestResolve:
    def test_calls_plugin_procedure(self, platform) -> None:
        params = {"server_host": {"value": "h"}}
        out = PluginAddressResolver(platform).resolve("MDB", "SQL Server Authentication", params)
        assert out == platform.addresses
        (call,) = platform.calls("call IDENTIFIER")
        assert call[0] == "MDB.PLUGIN.NETWORK_ADDRESSES"
        assert call[1] == "SQL Server Authentication"
        assert json.loads(call[2]) == params

    def test_result_not_interpreted(self, platform) -> None:
        platform.addresses = {"opaque": ["anything", 1]}
        assert PluginAddressResolver(platform).resolve("MDB", "m", {}) == {"opaque": ["anything", 1]}

    def test_failure_surfaces_plugin_message(self, platform) -> None:
        platform.failing_methods.add("Windows Auth")
        with pytest.raises(AddressResolutionError, match="unsupported method Windows Auth"):
            PluginAddressResolver(platform).resolve("MDB", "Windows Auth", {})

    def test_custom_procedure_name(self, platform) -> None:
        r = PluginAddressResolver(platform, plugin_schema="API", procedure="ADDRS")
        assert r.procedure_name("MDB") == "MDB.API.ADDRS"

    def test_plugin_database_validated(self, platform) -> None:
        with pytest.raises(ValidationError):
            PluginAddressResolver(platform).resolve("MDB; drop", "m", {})
        assert platform.statements == []

    def test_missing_procedure_wrapped(self, platform) -> None:
        platform.fail_on.add("addresses")
        with pytest.raises(AddressResolutionError, match="does not exist") as exc:
            PluginAddressResolver(platform).resolve("MDB", "m", {})
        assert isinstance(exc.value.__cause__, RuntimeError)
