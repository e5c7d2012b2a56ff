"""
Pytest configuration and fixtures for ng_locators tests
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Make the package importable when running from a source checkout
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from ng_locators import NgBy, build_default_registry  # noqa: E402
from ng_locators.local import LocalAngular, LocalDriver  # noqa: E402

PETS_PAGE = """
<html>
<head><title>Pets</title></head>
<body ng-app="pets">
  <div id="cats">
    <div ng-repeat="cat in cats" id="cat-0" class="cat"><span class="name">{{cat.name}}</span><span ng-bind="cat.age" class="age"></span></div>
    <div ng-repeat="cat in cats" id="cat-1" class="cat"><span class="name">{{cat.name}}</span><span ng-bind="cat.age" class="age"></span></div>
    <div ng-repeat="cat in cats" id="cat-2" class="cat"><span class="name">{{cat.name}}</span><span ng-bind="cat.age" class="age"></span></div>
  </div>
  <div id="library">
    <div class="book-img" ng-repeat-start="book in library" id="book-0-img"><img ng-src="{{book.imgUrl}}"></div>
    <div class="book-info" ng-repeat-end id="book-0-info"><h4>{{book.name}}</h4><p>{{book.blurb}}</p></div>
    <!-- end ngRepeat: book in library -->
    <div class="book-img" ng-repeat-start="book in library" id="book-1-img"><img ng-src="{{book.imgUrl}}"></div>
    <div class="book-info" ng-repeat-end id="book-1-info"><h4>{{book.name}}</h4><p>{{book.blurb}}</p></div>
    <!-- end ngRepeat: book in library -->
  </div>
  <form id="person">
    <input type="text" ng-model="person.name" id="name-input">
    <input type="text" data-ng-model="person.email" id="email-input">
    <span id="greeting">Hello {{person.name}}</span>
    <button id="save">Save</button>
    <button id="save-all">Save All</button>
    <input type="submit" value="Save" id="submit-save">
    <input type="button" value="Cancel" id="cancel">
  </form>
  <ul id="pet-list">
    <li class="pet">Dog</li>
    <li class="pet">Cat</li>
  </ul>
</body>
</html>
"""

PETS_SCOPE = {"person": {"name": "Ann", "email": "ann@example.com"}, "cats": [{"name": "Tom"}]}


@pytest.fixture
def registry():
    """Create a default finder registry."""
    return build_default_registry()


@pytest.fixture
def by(registry):
    """Create locator factory sharing the registry fixture."""
    return NgBy(registry)


@pytest.fixture
def mock_driver():
    """Create mock WebDriver."""
    driver = MagicMock()
    driver.current_url = "http://test.com/#/pets"
    driver.title = "Pets"
    driver.execute_script.return_value = []
    driver.execute_async_script.return_value = None
    return driver


@pytest.fixture
def angular():
    """Angular app state for the pets page."""
    return LocalAngular(scope=PETS_SCOPE, location="http://test.com/#/pets")


@pytest.fixture
def local_driver(angular):
    """Local driver serving the pets page with Angular loaded."""
    return LocalDriver(PETS_PAGE, angular, url="http://test.com/#/pets")
