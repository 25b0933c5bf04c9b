"""Tests for the global command cache."""

import asyncio
import tempfile

import pytest

from shellsuggest.application.command_cache import CACHED_PWSH_COMMANDS_KEY, GlobalCommandCache
from shellsuggest.domain.protocols import StorageScope
from shellsuggest.infrastructure.state import FileStateProvider, InMemoryStateProvider


class TestGlobalCommandCache:
    @pytest.mark.asyncio
    async def test_replace_persists_items(self, command_cache, state_provider, make_item):
        command_cache.replace([make_item("git"), make_item("gci")])
        await command_cache.flush()

        stored = await state_provider.load(command_cache.storage_key)
        assert [entry["label"] for entry in stored] == ["git", "gci"]
        assert command_cache.storage_key == f"application:{CACHED_PWSH_COMMANDS_KEY}"

    @pytest.mark.asyncio
    async def test_replace_is_wholesale(self, command_cache, make_item):
        command_cache.replace([make_item("git")])
        command_cache.replace([make_item("gci")])
        assert [item.label for item in command_cache.snapshot()] == ["gci"]

    def test_add_keeps_first_item_per_label(self, state_provider, make_item):
        cache = GlobalCommandCache(state_provider)
        first = make_item("git", detail="first")
        cache.add([first, make_item("git", detail="second")])
        assert cache.snapshot() == [first]
        assert "git" in cache

    @pytest.mark.asyncio
    async def test_hydrates_from_storage(self, state_provider, make_item):
        writer = GlobalCommandCache(state_provider)
        writer.replace([make_item("Get-ChildItem")])
        await writer.flush()

        reader = GlobalCommandCache(state_provider)
        assert reader.is_empty()
        await reader.ensure_hydrated()
        assert [item.label for item in reader.snapshot()] == ["Get-ChildItem"]
        assert reader.snapshot()[0] == writer.snapshot()[0]

    @pytest.mark.asyncio
    async def test_hydrates_only_once(self, state_provider, make_item):
        cache = GlobalCommandCache(state_provider)
        await cache.ensure_hydrated()

        await state_provider.save(cache.storage_key, [make_item("late").to_dict()])
        await cache.ensure_hydrated()
        assert cache.is_empty()

    @pytest.mark.asyncio
    async def test_initial_items_skip_hydration(self, state_provider, make_item):
        await state_provider.save(f"application:{CACHED_PWSH_COMMANDS_KEY}", [make_item("stored").to_dict()])

        cache = GlobalCommandCache(state_provider, initial=[make_item("provided")])
        await cache.ensure_hydrated()
        assert [item.label for item in cache.snapshot()] == ["provided"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "stored",
        [
            {"label": "not a list"},
            [{"label": "missing detail"}],
            [{"label": "x", "detail": "x", "is_file": True, "is_directory": True}],
            ["just a string"],
        ],
    )
    async def test_invalid_stored_data_leaves_cache_empty(self, state_provider, stored):
        await state_provider.save(f"application:{CACHED_PWSH_COMMANDS_KEY}", stored)
        cache = GlobalCommandCache(state_provider)
        await cache.ensure_hydrated()
        assert cache.is_empty()

    @pytest.mark.asyncio
    async def test_corrupted_file_leaves_cache_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            provider = FileStateProvider(base_dir=tmpdir)
            cache = GlobalCommandCache(provider)
            provider.get_file_path(cache.storage_key).write_text("[{not json", encoding="utf-8")

            await cache.ensure_hydrated()
            assert cache.is_empty()

    @pytest.mark.asyncio
    async def test_clear_removes_memory_and_storage(self, state_provider, make_item):
        cache = GlobalCommandCache(state_provider)
        cache.replace([make_item("git")])
        await cache.flush()

        cache.clear()
        await cache.flush()

        assert cache.is_empty()
        assert await state_provider.exists(cache.storage_key) is False

        # Nothing to resurrect, in this process or the next
        await cache.ensure_hydrated()
        assert cache.is_empty()
        fresh = GlobalCommandCache(state_provider)
        await fresh.ensure_hydrated()
        assert fresh.is_empty()

    def test_clear_outside_event_loop_writes_synchronously(self, make_item):
        provider = InMemoryStateProvider()
        cache = GlobalCommandCache(provider)
        cache.replace([make_item("git")])
        assert len(provider) == 1

        cache.clear()
        assert len(provider) == 0

    @pytest.mark.asyncio
    async def test_persist_failure_is_not_raised(self, make_item):
        class FailingProvider(InMemoryStateProvider):
            async def save(self, key, data):
                raise IOError("disk full")

        cache = GlobalCommandCache(FailingProvider())
        cache.replace([make_item("git")])
        await cache.flush()
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_scope_namespaces_key(self, state_provider, make_item):
        cache = GlobalCommandCache(state_provider, scope=StorageScope.WORKSPACE)
        cache.replace([make_item("git")])
        await cache.flush()
        assert await state_provider.exists(f"workspace:{CACHED_PWSH_COMMANDS_KEY}")
        assert not await state_provider.exists(f"application:{CACHED_PWSH_COMMANDS_KEY}")

    @pytest.mark.asyncio
    async def test_concurrent_hydration_loads_once(self, slow_state_provider, make_item):
        writer = GlobalCommandCache(slow_state_provider)
        writer.replace([make_item("gci")])
        await writer.flush()

        cache = GlobalCommandCache(slow_state_provider)
        loads = []
        original_load = slow_state_provider.load

        async def counting_load(key):
            loads.append(key)
            return await original_load(key)

        slow_state_provider.load = counting_load
        await asyncio.gather(cache.ensure_hydrated(), cache.ensure_hydrated())

        assert len(loads) == 1
        assert [item.label for item in cache.snapshot()] == ["gci"]

    @pytest.mark.asyncio
    async def test_replace_during_hydration_wins(self, slow_state_provider, make_item):
        """Stored commands read after a replace are discarded."""
        writer = GlobalCommandCache(slow_state_provider)
        writer.replace([make_item("stale")])
        await writer.flush()

        cache = GlobalCommandCache(slow_state_provider)
        hydration = asyncio.create_task(cache.ensure_hydrated())
        await asyncio.sleep(0)
        cache.replace([make_item("fresh")])
        await hydration

        assert [item.label for item in cache.snapshot()] == ["fresh"]
        assert cache.hydrated is True
