"""Client runtime for UI events.

Served at ``CLIENT_JS_PATH`` and referenced by the built-in layout. A
click on any element with ``data-event`` posts the event, its JSON args,
the current input values, and the opaque UI state back to the page URL,
then applies the JSON reply: navigate on ``_redirect_``, patch the body
and keep the new state on ``_sel_``, or flag inputs on ``!errors``.
"""

CLIENT_JS_PATH = "/_trill/trill.js"

CLIENT_JS = """\
(function() {
  var state = '';

  function inputs() {
    var out = {};
    document.querySelectorAll('input, textarea, select').forEach(function(el) {
      var key = el.id || el.name;
      if (!key) return;
      out[key] = (el.type === 'checkbox' || el.type === 'radio') ? el.checked : el.value;
    });
    return out;
  }

  function emit(name, args) {
    var body = new URLSearchParams();
    body.set('_event', name);
    body.set('_args', JSON.stringify(args || []));
    body.set('_inputs', JSON.stringify(inputs()));
    body.set('__state', state);
    fetch(location.href, {method: 'POST', body: body})
      .then(function(r) { return r.json(); })
      .then(function(data) {
        if (data['_redirect_']) { location.href = data['_redirect_']; return; }
        if (data['!errors']) {
          document.querySelectorAll('[data-error]').forEach(function(el) { el.removeAttribute('data-error'); });
          data['!errors'].forEach(function(err) {
            var el = err.field && document.getElementById(err.field);
            if (el) el.setAttribute('data-error', err.message);
          });
          return;
        }
        if (data['_sel_'] && data['_sel_'].body !== undefined) document.body.innerHTML = data['_sel_'].body;
        if (data['_state_'] !== undefined) state = data['_state_'];
      });
  }

  document.addEventListener('click', function(e) {
    var el = e.target.closest('[data-event]');
    if (!el) return;
    e.preventDefault();
    emit(el.getAttribute('data-event'), JSON.parse(el.getAttribute('data-args') || '[]'));
  });

  window.trill = {emit: emit};
})();
"""
