"""Tests for the jsx scope."""
import pytest

from depscope.analyzer.models import Attribute, ComplexValue, PackageData
from depscope.exceptions import NoAttributeExpressionFoundError
from depscope.scopes.jsx_scope import JSX_HANDLER_MAP, JsxScope

from conftest import collect, make_source

SAMPLE = """
import { Slug as MySlug, Tile } from '@acme/ui';
import * as UI from '@acme/ui/extra';
import Button from '@acme/ui/button';
import Other from 'other-lib';

export const App = ({ props, handler }) => (
  <div>
    <MySlug kind="primary" size={4} disabled />
    <Tile {...props} onClick={handler} />
    <UI.Accordion open={false} />
    <Button.Item label={undefined} />
    <UI />
    <Other />
    <>
      <Button>text</Button>
    </>
  </div>
);
"""


@pytest.fixture
def scope(config, tmp_path):
    return JsxScope(PackageData('@acme/ui', '2.0.0'), root=str(tmp_path), config=config)


def _by_name(result):
    return {usage.canonical_name: usage for usage in result.usages}


def test_attributes_jsx_elements(scope):
    result = scope.run([make_source(SAMPLE, 'src/App.jsx')])

    assert result.failures == []
    assert sorted(_by_name(result)) == ['Button', 'Button.Item', 'Slug', 'Tile', 'UI.Accordion']
    assert all(usage.kind == 'jsx' for usage in result.usages)


def test_element_attributes(scope):
    usages = _by_name(scope.run([make_source(SAMPLE, 'src/App.jsx')]))

    assert usages['Slug'].usage.attributes == [
        Attribute('kind', 'primary'), Attribute('size', 4), Attribute('disabled', True),
    ]
    # Spread attributes are not collected
    assert usages['Tile'].usage.attributes == [Attribute('onClick', ComplexValue('handler'))]
    assert usages['UI.Accordion'].usage.attributes == [Attribute('open', False)]
    assert usages['Button.Item'].usage.attributes == [Attribute('label', None)]


def test_prefix_and_name(scope):
    usages = _by_name(scope.run([make_source(SAMPLE, 'src/App.jsx')]))

    accordion = usages['UI.Accordion'].usage
    assert (accordion.prefix, accordion.name) == ('UI', 'Accordion')
    item = usages['Button.Item'].usage
    assert (item.prefix, item.name) == ('Button', 'Item')
    assert usages['Button.Item'].import_record.is_default


def test_as_dict_plain_values(scope):
    usages = _by_name(scope.run([make_source(SAMPLE, 'src/App.jsx')]))
    assert usages['Tile'].as_dict()['attributes'] == {'onClick': 'handler'}
    assert usages['Slug'].as_dict()['import']['rename'] == 'MySlug'


def test_empty_expression_is_a_warning(scope):
    code = "import { Tile } from '@acme/ui';\nconst a = <Tile title={} kind=\"x\" />;\n"
    result = scope.run([make_source(code, 'src/a.jsx')])

    assert [usage.usage.attributes for usage in result.usages] == [[Attribute('kind', 'x')]]
    assert len(result.warnings) == 1
    assert isinstance(result.warnings[0].error, NoAttributeExpressionFoundError)


def test_typescript_without_jsx_is_not_scanned(scope):
    result = scope.run([make_source("import { Tile } from '@acme/ui';", 'src/a.ts')])
    assert result.usages == []


def test_collection_is_idempotent():
    first = collect(SAMPLE, JSX_HANDLER_MAP, 'App.jsx')
    second = collect(SAMPLE, JSX_HANDLER_MAP, 'App.jsx')

    assert first.imports == second.imports
    assert [element.access_path for element in first.elements] == \
        [element.access_path for element in second.elements]
