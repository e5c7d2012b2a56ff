"""
JavaScript finders run inside the browser via execute_script / execute_async_script.

Every finder is transmitted as source text, so a body must not reference
anything outside its own scope. Shared helpers are pasted into the bodies
that need them rather than referenced. Some drivers choke on // comments,
use /* */ inside scripts.
"""

from .registry import FinderFunction

# ---------------------------------------------------------------------------
# Helpers embedded into finder bodies
# ---------------------------------------------------------------------------

DEDUP_DOM_NODES_JS = r"""
  function dedupDomNodes(nodes) {
    if (nodes.length == 0) {
      return nodes;
    }
    var noDupes = true;
    nodes.sort(function(a, b) {
      if (a === b) {
        noDupes = false;
        return 0;
      }
      /* b follows a: keep a first */
      return ((a.compareDocumentPosition(b) & 6) == 4) ? -1 : 1;
    });
    if (noDupes) {
      return nodes;
    }
    var results = [];
    for (var i = 0, node = null, candidate = nodes[i], N = nodes.length;
         i < N;
         i++, candidate = nodes[i]) {
      if (candidate !== node) {
        node = candidate;
        results.push(node);
      }
    }
    return results;
  }
"""

ENSURE_ELEMENTS_JS = r"""
  function ensureElements(nodes) {
    for (var i = 0, N = nodes.length, hadText = false; i < N; i++) {
      if (nodes[i].nodeType == 3) {
        hadText = true;
        nodes[i] = nodes[i].parentNode;
      }
    }
    return (hadText) ? dedupDomNodes(nodes) : nodes;
  }
"""

REPEATER_ROWS_JS = r"""
  function repeaterRows(repeater, using) {
    var prefixes = ['ng-', 'ng_', 'data-ng-', 'x-ng-', 'ng\\:'];
    var rows = [];
    for (var p = 0; p < prefixes.length; ++p) {
      var attr = prefixes[p] + 'repeat';
      var repeatElems = using.querySelectorAll('[' + attr + ']');
      attr = attr.replace(/\\/g, '');
      for (var i = 0; i < repeatElems.length; ++i) {
        if (repeatElems[i].getAttribute(attr).indexOf(repeater) != -1) {
          rows.push(repeatElems[i]);
        }
      }
    }
    /* multiRows holds one array of elements per ng-repeat-start segment */
    var multiRows = [];
    for (var p = 0; p < prefixes.length; ++p) {
      var attr = prefixes[p] + 'repeat-start';
      var repeatElems = using.querySelectorAll('[' + attr + ']');
      attr = attr.replace(/\\/g, '');
      for (var i = 0; i < repeatElems.length; ++i) {
        if (repeatElems[i].getAttribute(attr).indexOf(repeater) != -1) {
          var elem = repeatElems[i];
          var row = [];
          while (elem && (elem.nodeType != 8 ||
              elem.nodeValue.indexOf(repeater) == -1)) {
            if (elem.nodeType == 1) {
              row.push(elem);
            }
            elem = elem.nextSibling;
          }
          multiRows.push(row);
        }
      }
    }
    return {rows: rows, multiRows: multiRows};
  }

  function repeaterRow(found, index) {
    var row = [];
    if (found.rows[index]) {
      row.push(found.rows[index]);
    }
    if (found.multiRows[index]) {
      row = row.concat(found.multiRows[index]);
    }
    return row;
  }
"""

BINDINGS_IN_JS = r"""
  function bindingsIn(elem, binding) {
    var found = angular.getTestability(elem).findBindings(binding, false);
    return Array.prototype.slice.call(found);
  }
"""

BUTTON_TEXT_JS = r"""
  function buttonText(element) {
    if (element.tagName.toLowerCase() == 'button') {
      return element.innerText || element.textContent;
    }
    return element.value;
  }
"""

# ---------------------------------------------------------------------------
# Finders
# ---------------------------------------------------------------------------

WAIT_FOR_ANGULAR = FinderFunction(
    name="waitForAngular",
    params=("selector", "callback"),
    body=r"""
  var el = document.querySelector(selector);
  try {
    angular.getTestability(el).notifyWhenNoOutstandingRequests(callback);
  } catch (e) {
    console.log('waitForAngular: **** EXCEPTION: (continuing) ****\n' + e);
    callback(e);
  }
""",
)

DEDUP_DOM_NODES = FinderFunction(
    name="dedupDomNodes",
    params=("nodes",),
    body=DEDUP_DOM_NODES_JS + "  return dedupDomNodes(Array.prototype.slice.call(nodes));\n",
)

ENSURE_ELEMENTS = FinderFunction(
    name="ensureElements",
    params=("nodes",),
    body=DEDUP_DOM_NODES_JS + ENSURE_ELEMENTS_JS + "  return ensureElements(Array.prototype.slice.call(nodes));\n",
)

FIND_BINDINGS = FinderFunction(
    name="findBindings",
    params=("binding", "exactMatch", "using"),
    body=DEDUP_DOM_NODES_JS
    + ENSURE_ELEMENTS_JS
    + r"""
  var testability = angular.getTestability(using || document);
  var nodes = testability.findBindings(binding, exactMatch);
  /* bindings can sit on text nodes, webdriver only returns elements */
  return ensureElements(Array.prototype.slice.call(nodes));
""",
)

FIND_REPEATER_ROWS = FinderFunction(
    name="findRepeaterRows",
    params=("repeater", "index", "using"),
    body=REPEATER_ROWS_JS
    + r"""
  using = using || document;
  return repeaterRow(repeaterRows(repeater, using), index);
""",
)

FIND_ALL_REPEATER_ROWS = FinderFunction(
    name="findAllRepeaterRows",
    params=("repeater", "using"),
    body=r"""
  using = using || document;

  var rows = [];
  var addIfElem = function(elem) {
    if (elem.nodeType == 1) {
      rows.push(elem);
    }
  };

  var prefixes = ['ng-', 'ng_', 'data-ng-', 'x-ng-', 'ng\\:'];
  for (var containerMode = 0; containerMode < 2; ++containerMode) {
    var suffix = containerMode ? 'repeat' : 'repeat-start';
    for (var p = 0; p < prefixes.length; ++p) {
      var attr = prefixes[p] + suffix;
      var repeatElems = using.querySelectorAll('[' + attr + ']');
      attr = attr.replace(/\\/g, '');
      for (var i = 0; i < repeatElems.length; ++i) {
        var elem = repeatElems[i];
        if (elem.getAttribute(attr).indexOf(repeater) == -1) {
          continue;
        }
        if (containerMode) {
          addIfElem(elem);
        } else {
          while (elem && (elem.nodeType != 8 ||
                 elem.nodeValue.indexOf(repeater) == -1)) {
            addIfElem(elem);
            elem = elem.nextSibling;
          }
        }
      }
    }
  }
  return rows;
""",
)

FIND_REPEATER_ELEMENT = FinderFunction(
    name="findRepeaterElement",
    params=("repeater", "index", "binding", "using"),
    body=DEDUP_DOM_NODES_JS
    + ENSURE_ELEMENTS_JS
    + REPEATER_ROWS_JS
    + BINDINGS_IN_JS
    + r"""
  using = using || document;
  var row = repeaterRow(repeaterRows(repeater, using), index);
  var matches = [];
  for (var i = 0; i < row.length; ++i) {
    matches = matches.concat(bindingsIn(row[i], binding));
  }
  return dedupDomNodes(ensureElements(matches));
""",
)

FIND_REPEATER_COLUMN = FinderFunction(
    name="findRepeaterColumn",
    params=("repeater", "binding", "using"),
    body=DEDUP_DOM_NODES_JS
    + ENSURE_ELEMENTS_JS
    + REPEATER_ROWS_JS
    + BINDINGS_IN_JS
    + r"""
  using = using || document;
  var found = repeaterRows(repeater, using);
  var matches = [];
  for (var i = 0; i < found.rows.length; ++i) {
    matches = matches.concat(bindingsIn(found.rows[i], binding));
  }
  for (var i = 0; i < found.multiRows.length; ++i) {
    for (var j = 0; j < found.multiRows[i].length; ++j) {
      matches = matches.concat(bindingsIn(found.multiRows[i][j], binding));
    }
  }
  return dedupDomNodes(ensureElements(matches));
""",
)

FIND_BY_MODEL = FinderFunction(
    name="findByModel",
    params=("model", "using"),
    body=r"""
  var testability = angular.getTestability(using || document);
  return testability.findModels(model);
""",
)

FIND_BY_BUTTON_TEXT = FinderFunction(
    name="findByButtonText",
    params=("searchText", "using"),
    body=BUTTON_TEXT_JS
    + r"""
  using = using || document;
  var elements = using.querySelectorAll('button, input[type="button"], input[type="submit"]');
  var matches = [];
  for (var i = 0; i < elements.length; ++i) {
    if (buttonText(elements[i]) === searchText) {
      matches.push(elements[i]);
    }
  }
  return matches;
""",
)

FIND_BY_PARTIAL_BUTTON_TEXT = FinderFunction(
    name="findByPartialButtonText",
    params=("searchText", "using"),
    body=BUTTON_TEXT_JS
    + r"""
  using = using || document;
  var elements = using.querySelectorAll('button, input[type="button"], input[type="submit"]');
  var matches = [];
  for (var i = 0; i < elements.length; ++i) {
    if ((buttonText(elements[i]) || '').indexOf(searchText) > -1) {
      matches.push(elements[i]);
    }
  }
  return matches;
""",
)

FIND_BY_CSS_CONTAINING_TEXT = FinderFunction(
    name="findByCssContainingText",
    params=("cssSelector", "searchText", "using"),
    body=r"""
  using = using || document;
  var elements = using.querySelectorAll(cssSelector);
  var matches = [];
  for (var i = 0; i < elements.length; ++i) {
    var element = elements[i];
    var elementText = element.innerText || element.textContent;
    if (elementText.indexOf(searchText) > -1) {
      matches.push(element);
    }
  }
  return matches;
""",
)

TEST_FOR_ANGULAR = FinderFunction(
    name="testForAngular",
    params=("attempts", "asyncCallback"),
    body=r"""
  var callback = function(args) {
    setTimeout(function() {
      asyncCallback(args);
    }, 0);
  };
  var check = function(n) {
    try {
      if (window.angular && window.angular.resumeBootstrap) {
        callback([true, null]);
      } else if (n < 1) {
        if (window.angular) {
          callback([false, 'angular never provided resumeBootstrap']);
        } else {
          callback([false, 'retries looking for angular exceeded']);
        }
      } else {
        window.setTimeout(function() {check(n - 1);}, 1000);
      }
    } catch (e) {
      callback([false, e]);
    }
  };
  check(attempts);
""",
)

EVALUATE = FinderFunction(
    name="evaluate",
    params=("element", "expression"),
    body=r"""
  var testability = angular.getTestability(element);
  return testability.eval(expression);
""",
)

ALLOW_ANIMATIONS = FinderFunction(
    name="allowAnimations",
    params=("element", "allow"),
    body=r"""
  var testability = angular.getTestability(element);
  return testability.allowAnimations(allow);
""",
)

GET_LOCATION_ABS_URL = FinderFunction(
    name="getLocationAbsUrl",
    params=("selector",),
    body=r"""
  var testability = angular.getTestability(document.querySelector(selector));
  return testability.getLocation();
""",
)

SET_LOCATION = FinderFunction(
    name="setLocation",
    params=("selector", "url"),
    body=r"""
  var testability = angular.getTestability(document.querySelector(selector));
  if (url !== testability.getLocation()) {
    testability.setLocation(url);
  }
""",
)

ALL_FINDERS = (
    WAIT_FOR_ANGULAR,
    DEDUP_DOM_NODES,
    ENSURE_ELEMENTS,
    FIND_BINDINGS,
    FIND_REPEATER_ROWS,
    FIND_ALL_REPEATER_ROWS,
    FIND_REPEATER_ELEMENT,
    FIND_REPEATER_COLUMN,
    FIND_BY_MODEL,
    FIND_BY_BUTTON_TEXT,
    FIND_BY_PARTIAL_BUTTON_TEXT,
    FIND_BY_CSS_CONTAINING_TEXT,
    TEST_FOR_ANGULAR,
    EVALUATE,
    ALLOW_ANIMATIONS,
    GET_LOCATION_ABS_URL,
    SET_LOCATION,
)
