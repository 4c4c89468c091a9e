"""
首页仪表盘 - 静态 HTML，通过 fetch 调用其他接口
"""

DASHBOARD_HTML = r"""<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>Harness CI Lab</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 24px; }
    .card { padding: 16px; border: 1px solid #ddd; border-radius: 10px; margin-bottom: 12px; }
    code { background: #f6f6f6; padding: 2px 6px; border-radius: 6px; }
    input, select { padding: 8px; border-radius: 8px; border: 1px solid #ccc; margin-right: 8px; }
    button { padding: 8px 12px; border-radius: 8px; border: 1px solid #4f46e5; background: #4f46e5; color: #fff; cursor: pointer; }
    button.danger { background: #dc2626; border-color: #dc2626; }
    pre { background: #fafafa; border: 1px solid #eee; border-radius: 8px; padding: 10px; overflow-x: auto; }
    .label { display: inline-block; width: 120px; color: #444; }
    .badge { position: fixed; right: 20px; bottom: 20px; background: #22c55e; color: #fff;
             padding: 10px 14px; border-radius: 999px; font-weight: bold; }
  </style>
</head>
<body>
  <h2>Harness CI Lab</h2>

  <div class="card">
    <b>Endpoints:</b>
    <code>/healthz</code> <code>/readyz</code> <code>/version</code> <code>/metrics</code>
    <code>/greet?name=John&amp;mode=pirate</code> <code>/chaos?action=crash</code>
  </div>

  <div class="card">
    <b>Try it</b>
    <div style="margin-top:10px;">
      <input id="name" type="text" placeholder="Your name" value="John" />
      <select id="mode">
        <option value="normal">Normal</option>
        <option value="pirate">Pirate</option>
      </select>
      <button onclick="greet()">Greet me</button>
    </div>
    <pre id="greeting">Click "Greet me" to generate a greeting...</pre>
  </div>

  <div class="card">
    <b>Build / Runtime</b>
    <div id="version" style="margin-top:10px;">Loading...</div>
  </div>

  <div class="card">
    <b>Metrics</b>
    <pre id="metrics">Loading...</pre>
  </div>

  <div class="card">
    <b>Chaos Engineering</b>
    <div style="margin-top:10px;">
      <button class="danger" onclick="chaos('crash')">Crash Pod</button>
      <button class="danger" onclick="chaos('enable')">Enable Chaos</button>
      <button onclick="chaos('disable')">Disable Chaos</button>
    </div>
    <pre id="chaos">Chaos controls allow testing self-healing...</pre>
  </div>

  <div class="badge" id="badge">Visitor #-</div>

<script>
const FIELDS = [
  ['Service', 'service'], ['Version', 'version'], ['Git SHA', 'gitSha'],
  ['Pod Name', 'podName'], ['Instance', 'instanceId'], ['Uptime', 'uptimeSeconds'], ['App Mode', 'mode']
];

async function refresh() {
  const v = await (await fetch('/version')).json();
  document.getElementById('version').innerHTML = FIELDS.map(([label, key]) =>
    '<div><span class="label">' + label + ':</span> <b>' + v[key] + (key === 'uptimeSeconds' ? 's' : '') + '</b></div>'
  ).join('');
  document.getElementById('metrics').textContent = await (await fetch('/metrics')).text();
}

async function greet() {
  const name = encodeURIComponent(document.getElementById('name').value || 'World');
  const mode = document.getElementById('mode').value;
  const text = await (await fetch('/greet?name=' + name + '&mode=' + mode)).text();
  document.getElementById('greeting').textContent = text;
  const match = text.match(/visitor #(\d+)/);
  if (match) document.getElementById('badge').textContent = 'Visitor #' + match[1];
  await refresh();
}

async function chaos(action) {
  const text = await (await fetch('/chaos?action=' + action)).text();
  document.getElementById('chaos').textContent = text;
  await refresh();
}

setInterval(refresh, 2000);
refresh();
</script>
</body>
</html>
"""
