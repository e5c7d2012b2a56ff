"""Tests for finder behaviour, run through the local harness."""

import pytest
from selenium.common.exceptions import TimeoutException

from ng_locators.exceptions import ScriptExecutionError, ScriptRegistrationError
from ng_locators.local import LocalAngular, LocalDriver


def element_ids(elements):
    return [element.get("id") for element in elements]


class TestBindings:
    """Test binding lookups"""

    def test_interpolated_text_returns_parent(self, by, local_driver):
        """Test bindings on text nodes come back as their elements"""
        spans = by.binding("{{cat.name}}").find_elements_override(local_driver)

        assert len(spans) == 3
        assert all(span.name == "span" and span["class"] == ["name"] for span in spans)

    def test_ng_bind_attribute(self, by, local_driver):
        """Test ng-bind elements are found"""
        ages = by.binding("cat.age").find_elements_override(local_driver)
        assert [span["class"] for span in ages] == [["age"], ["age"], ["age"]]

    def test_partial_vs_exact(self, by, local_driver):
        """Test exact_binding refuses substrings"""
        assert element_ids(by.binding("person").find_elements_override(local_driver)) == ["greeting"]
        assert by.exact_binding("person").find_elements_override(local_driver) == []
        assert element_ids(by.exact_binding("person.name").find_elements_override(local_driver)) == ["greeting"]
        assert element_ids(by.exact_binding("{{person.name}}").find_elements_override(local_driver)) == ["greeting"]

    def test_scoped(self, by, local_driver):
        """Test using limits the search"""
        row = local_driver.document.find(id="cat-1")
        spans = by.binding("{{cat.name}}").find_elements_override(local_driver, row)

        assert len(spans) == 1
        assert spans[0].parent is row

    def test_one_element_per_parent(self, by):
        """Test two bound text nodes in one element give that element once"""
        driver = LocalDriver('<p id="both">{{a}} and {{a}}<i>x</i>{{a}}</p>', LocalAngular())

        assert element_ids(by.binding("a").find_elements_override(driver)) == ["both"]

    def test_without_angular(self, by):
        """Test missing Angular raises a normalized error"""
        driver = LocalDriver("<span>{{x}}</span>")

        with pytest.raises(ScriptExecutionError, match="angular is not defined"):
            by.binding("x").find_elements_override(driver)


def test_find_by_model(by, local_driver):
    """Test ng-model and data-ng-model inputs"""
    assert element_ids(by.model("person.name").find_elements_override(local_driver)) == ["name-input"]
    assert element_ids(by.model("person.email").find_elements_override(local_driver)) == ["email-input"]
    assert by.model("person").find_elements_override(local_driver) == []


class TestButtons:
    """Test button text lookups"""

    def test_exact_text(self, by, local_driver):
        """Test buttonText matches whole text only"""
        assert element_ids(by.button_text("Save").find_elements_override(local_driver)) == ["save", "submit-save"]

    def test_partial_text(self, by, local_driver):
        """Test partialButtonText matches substrings"""
        assert element_ids(by.partial_button_text("Save").find_elements_override(local_driver)) == [
            "save",
            "save-all",
            "submit-save",
        ]

    def test_input_button_value(self, by, local_driver):
        """Test input[type=button] compares its value"""
        assert element_ids(by.button_text("Cancel").find_elements_override(local_driver)) == ["cancel"]

    def test_text_inputs_ignored(self, by):
        """Test only buttons and button-like inputs are considered"""
        driver = LocalDriver('<input type="text" value="Save"><button>Save</button>')
        found = by.button_text("Save").find_elements_override(driver)
        assert [el.name for el in found] == ["button"]


def test_css_containing_text(by, local_driver):
    """Test selector plus text filter"""
    found = by.css_containing_text(".pet", "Dog").find_elements_override(local_driver)
    assert [el.get_text() for el in found] == ["Dog"]


class TestRepeaters:
    """Test repeater lookups"""

    def test_all_rows_single_element_style(self, by, local_driver):
        """Test three ng-repeat siblings come back in source order"""
        rows = by.repeater("cat in cats").find_elements_override(local_driver)
        assert element_ids(rows) == ["cat-0", "cat-1", "cat-2"]

    def test_all_rows_segment_style(self, by, local_driver):
        """Test ng-repeat-start segments contribute every element"""
        rows = by.repeater("book in library").find_elements_override(local_driver)
        assert element_ids(rows) == ["book-0-img", "book-0-info", "book-1-img", "book-1-info"]

    def test_single_segment_is_one_row(self, by):
        """Test one start/end pair yields both children as one row"""
        driver = LocalDriver(
            "<div>"
            '<dt ng-repeat-start="item in items" id="term">a</dt>'
            '<dd ng-repeat-end id="definition">b</dd>'
            "<!-- end ngRepeat: item in items -->"
            '<p id="after">not part of the row</p>'
            "</div>"
        )
        assert element_ids(by.repeater("item in items").find_elements_override(driver)) == ["term", "definition"]
        assert element_ids(by.repeater("item in items").row(0).find_elements_override(driver)) == ["term", "definition"]

    def test_other_prefixes(self, by):
        """Test data-ng-, x-ng-, ng_ and ng: spellings"""
        driver = LocalDriver(
            '<li data-ng-repeat="t in todos" id="a"></li>'
            '<li x-ng-repeat="t in todos" id="b"></li>'
            '<li ng_repeat="t in todos" id="c"></li>'
            '<li ng:repeat="t in todos" id="d"></li>'
            '<li ng-repeat="x in other" id="e"></li>'
        )
        assert sorted(element_ids(by.repeater("t in todos").find_elements_override(driver))) == ["a", "b", "c", "d"]

    def test_row(self, by, local_driver):
        """Test row returns only that row"""
        assert element_ids(by.repeater("cat in cats").row(1).find_elements_override(local_driver)) == ["cat-1"]
        assert element_ids(by.repeater("book in library").row(1).find_elements_override(local_driver)) == [
            "book-1-img",
            "book-1-info",
        ]

    def test_row_out_of_range(self, by, local_driver):
        """Test a missing row is empty"""
        assert by.repeater("cat in cats").row(7).find_elements_override(local_driver) == []

    def test_column(self, by, local_driver):
        """Test column collects the binding across rows"""
        names = by.repeater("cat in cats").column("{{cat.name}}").find_elements_override(local_driver)
        assert [name.parent["id"] for name in names] == ["cat-0", "cat-1", "cat-2"]

        titles = by.repeater("book in library").column("book.name").find_elements_override(local_driver)
        assert [title.name for title in titles] == ["h4", "h4"]

    def test_row_and_column_orders_agree(self, by, local_driver):
        """Test both chain orders find the same single element"""
        row_first = by.repeater("cat in cats").row(1).column("{{cat.name}}").find_elements_override(local_driver)
        column_first = by.repeater("cat in cats").column("{{cat.name}}").row(1).find_elements_override(local_driver)

        assert len(row_first) == 1
        assert row_first[0] is column_first[0]
        assert row_first[0].parent["id"] == "cat-1"

    def test_row_and_column_in_segment(self, by, local_driver):
        """Test intersection inside an ng-repeat-start segment"""
        found = by.repeater("book in library").row(0).column("{{book.blurb}}").find_elements_override(local_driver)
        assert [el.name for el in found] == ["p"]
        assert found[0].parent["id"] == "book-0-info"


class TestTestForAngular:
    """Test the testForAngular polling script"""

    def test_found(self):
        """Test Angular with resumeBootstrap"""
        driver = LocalDriver("<body></body>", LocalAngular())
        assert driver.run_async_command("testForAngular", 0) == [True, None]

    def test_missing_resume_bootstrap(self):
        """Test Angular present but not resumable"""
        driver = LocalDriver("<body></body>", LocalAngular(resume_bootstrap=False))
        assert driver.run_async_command("testForAngular", 0) == [False, "angular never provided resumeBootstrap"]

    def test_never_loaded(self):
        """Test no Angular at all"""
        driver = LocalDriver("<body></body>")
        assert driver.run_async_command("testForAngular", 0) == [False, "retries looking for angular exceeded"]

    def test_retries_until_loaded(self):
        """Test Angular loading while polling"""
        driver = LocalDriver("<body></body>")
        driver.window.set_timeout(lambda: setattr(driver.window, "angular", LocalAngular()), 2500)

        assert driver.run_async_command("testForAngular", 3) == [True, None]
        assert driver.window.now == 3000

    def test_attempts_exhausted(self):
        """Test polling gives up after the attempts budget"""
        driver = LocalDriver("<body></body>")
        driver.window.set_timeout(lambda: setattr(driver.window, "angular", LocalAngular()), 5000)

        assert driver.run_async_command("testForAngular", 2) == [False, "retries looking for angular exceeded"]
        assert driver.window.now == 2000

    def test_exception_delivered(self):
        """Test an error while checking is passed back as the exception itself"""

        class BrokenAngular(LocalAngular):
            @property
            def resume_bootstrap(self):
                raise RuntimeError("bootstrap state unreadable")

            @resume_bootstrap.setter
            def resume_bootstrap(self, value):
                pass

        driver = LocalDriver("<body></body>", BrokenAngular())

        found, error = driver.run_async_command("testForAngular", 0)

        assert found is False
        assert isinstance(error, RuntimeError)
        assert str(error) == "bootstrap state unreadable"


class TestWaitForAngular:
    """Test the waitForAngular script"""

    def test_idle(self, local_driver):
        """Test no outstanding requests resolves at once"""
        assert local_driver.run_async_command("waitForAngular", "body") is None

    def test_waits_for_requests(self, angular, local_driver):
        """Test resolution waits for outstanding requests"""
        angular.start_request()
        local_driver.window.set_timeout(angular.finish_request, 300)

        assert local_driver.run_async_command("waitForAngular", "body") is None
        assert local_driver.window.now == 300

    def test_never_idle_times_out(self, angular, local_driver):
        """Test a request that never finishes"""
        angular.start_request()

        with pytest.raises(TimeoutException):
            local_driver.run_async_command("waitForAngular", "body")

    def test_exception_resolves_with_error(self):
        """Test a framework error is passed to the callback"""
        driver = LocalDriver("<body></body>")

        result = driver.run_async_command("waitForAngular", "body")

        assert isinstance(result, NameError)
        assert driver.window.console[0].startswith("waitForAngular: **** EXCEPTION")


class TestLocalDriver:
    """Test the local command table"""

    def test_custom_command(self, by, local_driver):
        """Test custom locators need a registered local command"""
        by.add_locator("first_pet", "return [document.querySelector('.pet')];")
        local_driver.register("first_pet", lambda window, using: [window.document.select_one(".pet")])

        found = by.first_pet().find_elements_override(local_driver)

        assert [el.get_text() for el in found] == ["Dog"]

    def test_unregistered_command(self, by, local_driver):
        """Test a command missing from the table"""
        by.add_locator("nowhere", "return [];")

        with pytest.raises(ScriptExecutionError, match="nowhere is not a function"):
            by.nowhere().find_elements_override(local_driver)

    def test_register_twice(self, local_driver):
        """Test built-in commands cannot be replaced"""
        with pytest.raises(ScriptRegistrationError):
            local_driver.register("findBindings", lambda window: [])

    def test_dedup_and_ensure_commands(self, local_driver):
        """Test helper finders are available as commands"""
        cat = local_driver.document.find(id="cat-0")
        text = cat.find("span").contents[0]

        assert local_driver.run_command("ensureElements", [text]) == [cat.find("span")]
        assert local_driver.run_command("dedupDomNodes", [cat, cat]) == [cat]
