import pytest

from data_extractor import BrowserScript, DataExtractor, PlaywrightScope, as_scope
from data_extractor.browser import EXTRACT_TEXT_SCRIPT


class FakeElementHandle:
    """Stands in for a Playwright ElementHandle; selectors match by class name."""

    def __init__(self, text="", classes=(), children=()):
        self.text = text
        self.classes = set(classes)
        self.children = list(children)
        self.scripts = []

    def _descendants(self):
        for child in self.children:
            yield child
            yield from child._descendants()

    async def query_selector(self, selector):
        matches = await self.query_selector_all(selector)
        return matches[0] if matches else None

    async def query_selector_all(self, selector):
        name = selector.lstrip(".")
        return [element for element in self._descendants() if name in element.classes]

    async def evaluate(self, expression, arg=None):
        self.scripts.append(expression)
        if expression == EXTRACT_TEXT_SCRIPT:
            return self.text
        return f"evaluated:{self.text}"


@pytest.fixture
def page_root():
    """Provide a small element tree."""
    return FakeElementHandle(children=[
        FakeElementHandle("Widget", classes=["name"]),
        FakeElementHandle("$1,250.00", classes=["price"]),
        FakeElementHandle(classes=["row"], children=[FakeElementHandle("a", classes=["cell"])]),
        FakeElementHandle(classes=["row"], children=[FakeElementHandle("b", classes=["cell"])]),
    ])


class TestPlaywrightScope:
    """Test suite for the Playwright-backed query scope."""

    @pytest.mark.asyncio
    async def test_text_runs_in_page(self, page_root):
        name = await PlaywrightScope(page_root).match_one(".name")
        assert await name.text_of() == "Widget"
        assert name.handle.scripts == [EXTRACT_TEXT_SCRIPT]

    @pytest.mark.asyncio
    async def test_no_match(self, page_root):
        scope = PlaywrightScope(page_root)
        assert await scope.match_one(".missing") is None
        assert await scope.match_all(".missing") == []

    @pytest.mark.asyncio
    async def test_browser_script_is_evaluated(self, page_root):
        name = await PlaywrightScope(page_root).match_one(".name")
        script = BrowserScript("el => el.dataset.sku")
        assert await name.invoke(script) == "evaluated:Widget"
        assert name.handle.scripts == ["el => el.dataset.sku"]

    @pytest.mark.asyncio
    async def test_python_callable_receives_handle(self, page_root):
        async def extract(handle):
            return await handle.evaluate("el => el.id")

        name = await PlaywrightScope(page_root).match_one(".name")
        assert await name.invoke(extract) == "evaluated:Widget"

    @pytest.mark.asyncio
    async def test_extraction(self, page_root):
        schema = {
            "name": {"type": "string", "selector": ".name"},
            "price": {"type": "number", "selector": ".price"},
            "rows": {
                "type": "array",
                "selector": ".row",
                "items": {"cell": {"type": "string", "selector": ".cell"}}
            },
            "sku": {"type": "custom", "selector": ".name", "extract": BrowserScript("el => el.dataset.sku")}
        }
        result = await DataExtractor(schema).extract_from(PlaywrightScope(page_root))

        assert result == {
            "name": "Widget",
            "price": 1250.0,
            "rows": [{"cell": "a"}, {"cell": "b"}],
            "sku": "evaluated:Widget"
        }

    def test_as_scope_rejects_unknown_handles(self, page_root):
        with pytest.raises(TypeError):
            as_scope(page_root)

    def test_as_scope_keeps_scopes(self, page_root):
        scope = PlaywrightScope(page_root)
        assert as_scope(scope) is scope
