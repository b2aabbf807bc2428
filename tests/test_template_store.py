"""
Tests for the JSON file backed template store.

Covers:
- Add / get / list / update / delete
- Same-name replacement keeps the stored id and creation time
- Legacy preset filtering (and the rewrite of the cleaned file)
- Missing and corrupt files, unreadable entries kept on write
- The separate component template store
- Config directory override through the environment
"""
import json
import os

import pytest

from models.template import Template, ComponentTemplate
from models.transform import Size
from services.template_store import (
    TemplateStore, ComponentTemplateStore, default_config_dir, is_legacy_preset,
)


def make_template(name, template_id=None, **kwargs):
    return Template(id=template_id or Template.new_id(), name=name, slot_size=Size(100, 50), **kwargs)


class TestTemplateStoreBasics:

    def test_missing_file_is_empty(self, template_store):
        assert template_store.list() == []
        assert not os.path.exists(template_store.path)

    def test_add_and_get(self, template_store, sample_template):
        template_store.add(sample_template)
        assert template_store.get('tpl-penalty') == sample_template
        assert template_store.get_by_name('Penalty Row') == sample_template

    def test_get_unknown(self, template_store):
        assert template_store.get('nope') is None
        assert template_store.get(None) is None

    def test_file_is_json_list(self, template_store, sample_template):
        template_store.add(sample_template)
        with open(template_store.path, encoding='utf-8') as f:
            raw = json.load(f)
        assert isinstance(raw, list)
        assert raw[0]['name'] == 'Penalty Row'
        assert raw[0]['slotSize'] == {'width': 100.0, 'height': 50.0}

    def test_creates_directory(self, tmp_path, sample_template):
        store = TemplateStore(str(tmp_path / 'nested' / 'dir' / 'templates.json'))
        store.add(sample_template)
        assert os.path.exists(store.path)

    def test_delete(self, template_store, sample_template):
        template_store.add(sample_template)
        assert template_store.delete('tpl-penalty') is True
        assert template_store.delete('tpl-penalty') is False
        assert template_store.list() == []

    def test_update(self, template_store, sample_template):
        template_store.add(sample_template)
        updated = template_store.update('tpl-penalty', description='Minor penalties')
        assert updated.description == 'Minor penalties'
        assert template_store.get('tpl-penalty').description == 'Minor penalties'

    def test_update_unknown(self, template_store):
        assert template_store.update('nope', name='x') is None


class TestSameNameReplacement:

    def test_replace_keeps_id_and_created(self, template_store):
        first = template_store.add(make_template('Row', created_at=1000, updated_at=1000))
        second = template_store.add(make_template('Row', description='v2'))
        assert second.id == first.id
        assert second.created_at == 1000
        assert second.description == 'v2'
        assert len(template_store.list()) == 1

    def test_different_names_kept(self, template_store):
        template_store.add(make_template('A'))
        template_store.add(make_template('B'))
        assert [t.name for t in template_store.list()] == ['A', 'B']


class TestPresetFiltering:

    def write_raw(self, store, entries):
        with open(store.path, 'w', encoding='utf-8') as f:
            json.dump(entries, f)

    def test_presets_dropped_and_file_rewritten(self, template_store):
        self.write_raw(template_store, [
            make_template('Keep').to_dict(),
            make_template('Flagged', is_preset=True).to_dict(),
            make_template('[Preset] Old Row').to_dict(),
        ])
        assert [t.name for t in template_store.load()] == ['Keep']
        with open(template_store.path, encoding='utf-8') as f:
            assert len(json.load(f)) == 1

    def test_is_legacy_preset(self):
        assert is_legacy_preset(make_template('[Preset] X'))
        assert is_legacy_preset(make_template('X', is_preset=True))
        assert not is_legacy_preset(make_template('Preset X'))


class TestDamagedFiles:

    def test_corrupt_json(self, template_store):
        with open(template_store.path, 'w', encoding='utf-8') as f:
            f.write('{not json')
        assert template_store.load() == []

    def test_not_a_list(self, template_store):
        with open(template_store.path, 'w', encoding='utf-8') as f:
            json.dump({'name': 'x'}, f)
        assert template_store.load() == []

    def test_unreadable_entry_skipped(self, template_store):
        with open(template_store.path, 'w', encoding='utf-8') as f:
            json.dump([{'components': []}, make_template('Good').to_dict()], f)
        assert [t.name for t in template_store.load()] == ['Good']

    def test_unreadable_entry_kept_on_write(self, template_store):
        future = {'name': 'Future', 'components': [{'type': 'image'}]}
        with open(template_store.path, 'w', encoding='utf-8') as f:
            json.dump([future], f)
        template_store.add(make_template('New'))
        with open(template_store.path, encoding='utf-8') as f:
            raw = json.load(f)
        assert [entry['name'] for entry in raw] == ['New', 'Future']
        assert raw[1] == future

    def test_unreadable_entry_survives_update_and_delete(self, template_store):
        future = {'name': 'Future', 'components': [{'type': 'image'}]}
        kept = make_template('Keep')
        with open(template_store.path, 'w', encoding='utf-8') as f:
            json.dump([kept.to_dict(), future], f)
        template_store.update(kept.id, description='edited')
        template_store.delete(kept.id)
        with open(template_store.path, encoding='utf-8') as f:
            assert json.load(f) == [future]
        assert template_store.list() == []


class TestConfigDir:

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv('OVERLAY_COMPOSER_HOME', str(tmp_path))
        assert default_config_dir() == str(tmp_path)
        assert TemplateStore().path == os.path.join(str(tmp_path), 'templates.json')

    def test_default_in_home(self, monkeypatch):
        monkeypatch.delenv('OVERLAY_COMPOSER_HOME', raising=False)
        assert default_config_dir().endswith('.overlay_composer')


class TestComponentTemplateStore:

    @pytest.fixture
    def store(self, tmp_path):
        return ComponentTemplateStore(str(tmp_path / 'component_templates.json'))

    @pytest.fixture
    def bug_template(self, sample_scene):
        return sample_scene.capture_component_template(['bug'], 'Scorebug')

    def test_default_file_name(self, monkeypatch, tmp_path):
        monkeypatch.setenv('OVERLAY_COMPOSER_HOME', str(tmp_path))
        assert ComponentTemplateStore().path == os.path.join(str(tmp_path), 'component_templates.json')

    def test_add_and_get(self, store, bug_template):
        store.add(bug_template)
        loaded = store.get(bug_template.id)
        assert isinstance(loaded, ComponentTemplate)
        assert [n.kind for n in loaded.nodes] == ['group', 'score', 'score']
        with open(store.path, encoding='utf-8') as f:
            assert json.load(f)[0]['boundingBox'] == {'width': 588.0, 'height': 194.0}

    def test_replace_by_name(self, store, bug_template, sample_scene):
        first = store.add(bug_template)
        second = store.add(sample_scene.capture_component_template(['clock'], 'Scorebug'))
        assert second.id == first.id
        assert len(store.list()) == 1
        assert [n.kind for n in store.get(first.id).nodes] == ['clock']

    def test_preset_names_not_filtered(self, store, bug_template):
        store.add(bug_template.with_changes(name='[Preset] Scorebug'))
        assert [t.name for t in store.list()] == ['[Preset] Scorebug']

    def test_delete(self, store, bug_template):
        store.add(bug_template)
        assert store.delete(bug_template.id) is True
        assert store.list() == []

    def test_separate_from_slot_templates(self, tmp_path, bug_template, sample_template):
        slots = TemplateStore(str(tmp_path / 'templates.json'))
        components = ComponentTemplateStore(str(tmp_path / 'component_templates.json'))
        slots.add(sample_template)
        components.add(bug_template)
        assert [t.name for t in slots.list()] == ['Penalty Row']
        assert [t.name for t in components.list()] == ['Scorebug']
