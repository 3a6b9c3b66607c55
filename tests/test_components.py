# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for template extraction, components and ComponentHost."""

import logging

import pytest

from genro_appstore import (
    Component,
    ComponentDefinitionError,
    ComponentHost,
    Template,
    call_hook,
    extract_templates,
    generate_id,
    implements,
)

PAGE = """
<template id="user-card" title>
  <h1>User</h1>
  <script>self.subscribe('user')</script>
  <p class="name">&amp; more</p>
</template>
<template id="app-footer"><footer>(c)</footer></template>
"""


def make_fetch(pages):
    """Return a fetch coroutine serving pages and recording requests."""
    requested = []

    async def fetch(url):
        requested.append(url)
        return pages.get(url)

    fetch.requested = requested
    return fetch


class TestTemplates:
    """Tests for extract_templates."""

    def test_extract_ids_in_order(self):
        """Test templates are returned in document order."""
        templates = extract_templates(PAGE)
        assert [t.id for t in templates] == ['user-card', 'app-footer']

    def test_scripts_removed_from_content(self):
        """Test inline scripts are split out of the content."""
        card = extract_templates(PAGE)[0]
        assert card.script == "self.subscribe('user')"
        assert '<script>' not in card.content
        assert '<h1>User</h1>' in card.content
        assert '&amp; more' in card.content

    def test_attributes(self):
        """Test template attributes become the observed attributes."""
        card = extract_templates(PAGE)[0]
        assert card.attributes == {'id': 'user-card', 'title': ''}
        assert card.observed_attributes == ('id', 'title')

    def test_nested_template_stays_in_content(self):
        """Test only top-level templates are extracted."""
        html = '<template id="outer"><template id="inner"><b>x</b></template></template>'
        templates = extract_templates(html)
        assert [t.id for t in templates] == ['outer']
        assert templates[0].content == '<template id="inner"><b>x</b></template>'

    def test_template_without_id(self):
        """Test a template without id has id None."""
        [template] = extract_templates('<template><i>x</i></template>')
        assert template.id is None

    def test_no_templates(self):
        """Test plain HTML yields nothing."""
        assert extract_templates('<div>no templates</div>') == []


class TestHooks:
    """Tests for the hook capability pipeline."""

    def test_generate_id(self):
        """Test ids are 12 hex digits and differ."""
        first, second = generate_id(), generate_id()
        assert len(first) == 12
        int(first, 16)
        assert first != second

    @pytest.mark.asyncio
    async def test_absent_hook_is_skipped(self):
        """Test calling a hook the object lacks returns None."""

        class Plain:
            pass

        assert implements(Plain(), 'handle_connected') is False
        assert await call_hook(Plain(), 'handle_connected') is None

    @pytest.mark.asyncio
    async def test_sync_and_async_hooks(self):
        """Test both sync and async hooks are run."""

        class Both:
            def handle_adopted(self):
                return 'sync'

            async def handle_connected(self):
                return 'async'

        obj = Both()
        assert await call_hook(obj, 'handle_adopted') == 'sync'
        assert await call_hook(obj, 'handle_connected') == 'async'

    @pytest.mark.asyncio
    async def test_failing_hook_propagates(self):
        """Test a defined hook that raises is not swallowed."""

        class Broken:
            def handle_connected(self):
                raise TypeError("real bug")

        with pytest.raises(TypeError, match="real bug"):
            await call_hook(Broken(), 'handle_connected')


class CardBehavior:
    """Behavior mixin recording lifecycle events."""

    def init(self):
        self.events = ['init']

    async def handle_connected(self):
        self.events.append('connected')
        await self.subscribe('user', self.on_user)

    def handle_disconnected(self):
        self.events.append('disconnected')

    def handle_attribute_changed(self, name, old, new):
        self.events.append(('attr', name, old, new))

    def on_user(self, path, value):
        self.events.append((path, value))


class TestComponentHost:
    """Tests for ComponentHost loading and component lifecycle."""

    def make_host(self, pages=None, **kwargs):
        pages = pages if pages is not None else {'/a.html': PAGE}
        fetch = make_fetch(pages)
        sources = kwargs.pop('sources', list(pages))
        kwargs.setdefault('behaviors', {'user-card': CardBehavior})
        host = ComponentHost(
            sources,
            {'user': {'name': 'Ann'}},
            fetch=fetch,
            **kwargs,
        )
        return host, fetch

    @pytest.mark.asyncio
    async def test_load_defines_components(self):
        """Test every template becomes a registered component class."""
        host, fetch = self.make_host()
        names = await host.load_components()
        assert names == ['user-card', 'app-footer']
        assert set(host.registry) == {'user-card', 'app-footer'}
        assert host.registry['user-card'].__name__ == 'UserCard'
        assert issubclass(host.registry['user-card'], Component)
        assert fetch.requested == ['/a.html']

    @pytest.mark.asyncio
    async def test_failed_sources_skipped(self):
        """Test sources whose fetch returns None are ignored."""
        host, fetch = self.make_host(
            {'/a.html': '<template id="x-a"></template>'},
            sources=['/a.html', '/missing.html'],
        )
        assert await host.load_components() == ['x-a']
        assert fetch.requested == ['/a.html', '/missing.html']

    @pytest.mark.asyncio
    async def test_sources_concatenated_in_order(self):
        """Test texts from several sources are joined in source order."""
        host, _ = self.make_host({
            '/1.html': '<template id="x-one"></template>',
            '/2.html': '<template id="x-two"></template>',
        })
        assert await host.load_components() == ['x-one', 'x-two']

    @pytest.mark.asyncio
    async def test_versioned_cache(self):
        """Test a versioned host fetches once and then reads the cache."""
        cache = {}
        host, fetch = self.make_host(version='7', cache=cache)
        await host.load_components()
        assert cache['components-7'] == PAGE
        assert host.cache_key == 'components-7'

        again, fetch_again = self.make_host(version='7', cache=cache)
        assert await again.load_components() == ['user-card', 'app-footer']
        assert fetch_again.requested == []

    @pytest.mark.asyncio
    async def test_unversioned_always_fetches(self):
        """Test no cache is used without a version."""
        cache = {}
        host, fetch = self.make_host(cache=cache)
        await host.load_components()
        assert cache == {}
        assert host.cache_key is None

    @pytest.mark.asyncio
    async def test_duplicate_definition_raises(self):
        """Test a component name can only be defined once."""
        host, _ = self.make_host()
        await host.load_components()
        with pytest.raises(ComponentDefinitionError, match="already defined"):
            host.define_component(Template(id='user-card'))

    @pytest.mark.asyncio
    async def test_duplicate_template_does_not_stop_loading(self, caplog):
        """Test a repeated id is skipped and later templates are still defined."""
        host, _ = self.make_host({'/a.html': (
            '<template id="x-one"></template>'
            '<template id="x-one"></template>'
            '<template id="x-two"></template>'
        )})
        with caplog.at_level(logging.WARNING, logger='genro_appstore'):
            names = await host.load_components()
        assert names == ['x-one', 'x-two']
        assert set(host.registry) == {'x-one', 'x-two'}
        assert "already defined" in caplog.text

    def test_template_without_id_not_defined(self):
        """Test templates without id are skipped."""
        host, _ = self.make_host()
        assert host.define_component(Template(id=None)) is None
        assert host.registry == {}

    def test_create_unknown_raises(self):
        """Test creating an undefined component fails."""
        host, _ = self.make_host()
        with pytest.raises(ComponentDefinitionError, match="Unknown"):
            host.create('nope')

    @pytest.mark.asyncio
    async def test_component_instance(self):
        """Test instances get an id, attributes and template content."""
        host, _ = self.make_host(id_factory=lambda: 'abc123')
        await host.load_components()
        card = host.create('user-card', title='Hi')
        assert card.component_id == 'abc123'
        assert card.attributes == {'title': 'Hi'}
        assert '<h1>User</h1>' in card.content
        assert card.store is host.store
        assert card.connected is False

    @pytest.mark.asyncio
    async def test_lifecycle_and_subscription(self):
        """Test connect runs init once and wires store notifications."""
        host, _ = self.make_host()
        await host.load_components()
        card = host.create('user-card')

        await card.connect()
        await host.store.dispatcher.drain()
        assert card.events == ['init', 'connected', ('user', {'name': 'Ann'})]
        assert host.store.subscribers('user') == [card.component_id]

        await host.store.set('user.name', 'Bob')
        await host.store.dispatcher.drain()
        assert card.events[-1] == ('user.name', 'Bob')

        await card.disconnect()
        await card.connect()
        await host.store.dispatcher.drain()
        assert card.events.count('init') == 1
        assert 'disconnected' in card.events

    @pytest.mark.asyncio
    async def test_unsubscribe_all(self):
        """Test a component can drop all its subscriptions."""
        host, _ = self.make_host()
        await host.load_components()
        card = host.create('user-card')
        await card.connect()
        await card.unsubscribe_all()
        assert host.store.topics == []

    @pytest.mark.asyncio
    async def test_attribute_changes_forwarded_when_observed(self):
        """Test only observed attributes reach the hook."""
        host, _ = self.make_host()
        await host.load_components()
        card = host.create('user-card', title='old')
        await card.connect()
        await card.set_attribute('title', 'new')
        await card.set_attribute('other', 1)
        assert ('attr', 'title', 'old', 'new') in card.events
        assert not any(e[1] == 'other' for e in card.events if isinstance(e, tuple))
        assert card.attributes['other'] == 1

    @pytest.mark.asyncio
    async def test_component_without_behavior(self):
        """Test a component with no hooks goes through its lifecycle."""
        host, _ = self.make_host()
        await host.load_components()
        footer = host.create('app-footer')
        await footer.connect()
        await footer.adopt()
        await footer.attribute_changed('id', 'a', 'b')
        await footer.disconnect()
        assert footer.connected is True
