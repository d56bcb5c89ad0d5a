"""Tests for built-in extensions."""

import platform

import pytest

from plan_extensions.extractor import validate_annotations
from plan_extensions.service.builtin import BUILTIN_EXTENSIONS, HostExtension
from plan_extensions.storage import SubjectKey
from plan_extensions.types import FormatType, SubjectShape


class TestHostExtension:
    def test_in_registry(self):
        assert BUILTIN_EXTENSIONS["host"] is HostExtension

    def test_no_implementation_mistakes(self):
        descriptor = validate_annotations(HostExtension())

        assert descriptor.plugin_name == "Host"
        assert {p.subject_shape for p in descriptor.providers} == {SubjectShape.SERVER}
        uptime = next(p for p in descriptor.providers if p.name == "uptime")
        assert uptime.format_type == FormatType.TIME_MILLISECONDS

    @pytest.mark.asyncio
    async def test_gathered_for_server(self, service, store):
        assert await service.register(HostExtension())
        results = await service.update_server_values()

        assert results["Host"].ok
        key = SubjectKey("server", "11111111-2222-3333-4444-555555555555")
        value = await store.get_value("Host", "python_version", key)
        assert value.value == platform.python_version()
        assert (await store.get_value("Host", "cpu_count", key)).value >= 0
