"""
Tests for the headless CLI.

Covers:
- Render list output to stdout and to a file
- Slot expansion through a template store file
- Data driven text and compaction
- Expanded layout export
- Missing and malformed input files
"""
import json

import pytest

import headless
from models.scene import Scene


@pytest.fixture
def files(tmp_path, sample_layout, sample_template_dict, sample_data):
    """Layout, template store and data files in a temp directory"""
    layout = tmp_path / 'layout.json'
    layout.write_text(json.dumps(sample_layout), encoding='utf-8')
    templates = tmp_path / 'templates.json'
    templates.write_text(json.dumps([sample_template_dict]), encoding='utf-8')
    data = tmp_path / 'data.json'
    data.write_text(json.dumps(sample_data), encoding='utf-8')
    return {'layout': str(layout), 'templates': str(templates), 'data': str(data), 'dir': tmp_path}


def run(capsys, argv):
    code = headless.main(argv)
    return code, capsys.readouterr()


class TestRenderListOutput:

    def test_render_list_to_stdout(self, capsys, files):
        code, out = run(capsys, [files['layout'], '-t', files['templates']])
        assert code == 0
        entries = json.loads(out.out)
        assert [e['type'] for e in entries] == ['clock', 'custom', 'custom', 'custom', 'score', 'score']
        assert [e['effectiveLayer'] for e in entries] == [1, 3, 3, 3, 2000, 2001]

    def test_data_text(self, capsys, files):
        code, out = run(capsys, [files['layout'], '-t', files['templates'], '-d', files['data']])
        entries = {e['id']: e for e in json.loads(out.out)}
        assert entries['home-score']['text'] == '3'
        assert entries['clock']['text'] == '12:34'
        assert entries['clock']['opacityBinding'] == 'clockRunning'
        jerseys = [e['text'] for e in entries.values() if e.get('slot') is not None]
        assert jerseys == ['12', '--', '7']

    def test_without_data_text_is_missing(self, capsys, files):
        _, out = run(capsys, [files['layout'], '-t', files['templates']])
        entries = {e['id']: e for e in json.loads(out.out)}
        assert entries['away-score']['text'] == '--'

    def test_missing_templates_drop_slots(self, capsys, files):
        _, out = run(capsys, [files['layout'], '-t', str(files['dir'] / 'none.json')])
        entries = json.loads(out.out)
        assert len(entries) == 3

    def test_output_file(self, capsys, files):
        target = files['dir'] / 'render.json'
        code, out = run(capsys, [files['layout'], '-t', files['templates'], '-o', str(target)])
        assert code == 0
        assert out.out == ''
        assert len(json.loads(target.read_text(encoding='utf-8'))) == 6


class TestExportLayout:

    def test_export_layout(self, capsys, files):
        code, out = run(capsys, [files['layout'], '-t', files['templates'], '--export-layout'])
        assert code == 0
        layout = json.loads(out.out)
        ids = [c['id'] for c in layout['components']]
        assert 'penalties' not in ids
        assert len(ids) == 7
        scene = Scene.from_layout_dict(layout)
        slots = [n for n in scene.nodes if n.slot is not None]
        assert [n.position.y for n in slots] == [200.0, 255.0, 310.0]

    def test_export_layout_compacted(self, capsys, files, sample_layout):
        sample_layout['components'][-1]['props']['hideInactiveSlots'] = True
        with open(files['layout'], 'w', encoding='utf-8') as f:
            json.dump(sample_layout, f)
        _, out = run(capsys, [files['layout'], '-t', files['templates'], '-d', files['data'],
                              '--export-layout'])
        slots = [c for c in json.loads(out.out)['components'] if 'slot' in c]
        assert [c['slot'] for c in slots] == [0, 2]


class TestErrors:

    def test_missing_layout(self, capsys, tmp_path):
        code, out = run(capsys, [str(tmp_path / 'nope.json')])
        assert code == 1
        assert 'Layout file not found' in out.err

    def test_missing_data(self, capsys, files):
        code, out = run(capsys, [files['layout'], '-d', str(files['dir'] / 'nope.json')])
        assert code == 1
        assert 'Data file not found' in out.err

    def test_not_a_layout(self, capsys, files):
        with open(files['layout'], 'w', encoding='utf-8') as f:
            json.dump([1, 2, 3], f)
        code, out = run(capsys, [files['layout'], '-t', files['templates']])
        assert code == 1
        assert 'Could not load input files' in out.err
        assert 'Traceback' not in out.err

    def test_malformed_data_file(self, capsys, files):
        with open(files['data'], 'w', encoding='utf-8') as f:
            f.write('{not json')
        code, out = run(capsys, [files['layout'], '-t', files['templates'], '-d', files['data']])
        assert code == 1
        assert out.out == ''
        assert 'Could not load input files' in out.err

    def test_parser_defaults(self):
        args = headless.build_parser().parse_args(['layout.json'])
        assert args.templates is None
        assert args.data is None
        assert args.export_layout is False
