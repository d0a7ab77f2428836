from __future__ import annotations

import json
from typing import Any, Dict, List


def render_index(*, activities: List[Dict[str, Any]], logs: List[Dict[str, Any]]) -> str:
    # Server-rendered snapshot for first paint; the page refreshes through /rpc.
    initial_state = {
        "activities": activities,
        "logs": logs,
    }

    template = r"""<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Nexus Security Monitor</title>
    <style>
      :root {
        color-scheme: dark;
        --bg: #05080a;
        --panel: rgba(0, 0, 0, 0.35);
        --fg: #4ade80;
        --muted: rgba(134, 239, 172, 0.6);
        --line: rgba(34, 197, 94, 0.3);
        --r: 10px;
      }

      * { box-sizing: border-box; }

      body {
        margin: 0;
        background: linear-gradient(135deg, #0b0f14, #000 60%, #111827);
        color: var(--fg);
        font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace;
        height: 100vh;
        overflow: hidden;
      }

      header {
        display: flex;
        justify-content: space-between;
        align-items: center;
        padding: 12px 18px;
        border-bottom: 1px solid var(--line);
        background: rgba(0, 0, 0, 0.5);
      }

      h1 { margin: 0; font-size: 20px; letter-spacing: 0.12em; }
      h2 { margin: 0; font-size: 15px; letter-spacing: 0.08em; }
      .muted { color: var(--muted); font-size: 12px; }

      .stats { display: flex; gap: 22px; text-align: center; font-size: 12px; }
      .stats b { display: block; font-size: 16px; }
      .load-low { color: #4ade80; }
      .load-mid { color: #facc15; }
      .load-high { color: #f87171; }

      .grid {
        display: grid;
        grid-template-columns: 2fr 1fr;
        gap: 14px;
        padding: 14px;
        height: calc(100vh - 70px);
      }

      .panel {
        background: var(--panel);
        border: 1px solid var(--line);
        border-radius: var(--r);
        display: flex;
        flex-direction: column;
        overflow: hidden;
      }

      .panel-head {
        padding: 12px 14px;
        border-bottom: 1px solid var(--line);
        display: flex;
        justify-content: space-between;
        align-items: center;
      }

      #map { width: 100%; height: 100%; cursor: crosshair; }
      .map-wrap { flex: 1; position: relative; }

      #tooltip {
        position: absolute;
        pointer-events: none;
        background: rgba(0, 0, 0, 0.85);
        border: 1px solid var(--line);
        padding: 6px 8px;
        border-radius: 6px;
        font-size: 12px;
        display: none;
      }

      #logs { flex: 1; overflow-y: auto; padding: 8px 12px; font-size: 12px; }
      .log { padding: 6px 0; border-bottom: 1px dashed rgba(34, 197, 94, 0.12); }
      .log .meta { color: var(--muted); }

      .sev { font-weight: bold; text-transform: uppercase; }
      .sev-critical { color: #ef4444; }
      .sev-error { color: #f97316; }
      .sev-warning { color: #eab308; }
      .sev-info { color: #3b82f6; }
      .sev-debug { color: #8b5cf6; }

      select, button {
        background: #000;
        color: var(--fg);
        border: 1px solid var(--line);
        border-radius: 6px;
        font: inherit;
        font-size: 12px;
        padding: 4px 8px;
      }

      #drawer {
        position: fixed;
        inset: 0;
        background: rgba(0, 0, 0, 0.75);
        display: none;
        align-items: center;
        justify-content: center;
        z-index: 10;
      }

      #drawer .card {
        width: min(560px, 92vw);
        background: #030712;
        border: 1px solid var(--line);
        border-radius: var(--r);
        padding: 18px;
      }

      #drawer dl { display: grid; grid-template-columns: 140px 1fr; gap: 6px 10px; font-size: 13px; }
      #drawer dt { color: var(--muted); }
      #drawer dd { margin: 0; word-break: break-all; }
      #drawer pre { font-size: 12px; white-space: pre-wrap; }
    </style>
  </head>
  <body>
    <header>
      <div>
        <h1>NEXUS SECURITY MONITOR</h1>
        <div class="muted">[SIMULATION MODE] • <span id="mode">Live data</span></div>
      </div>
      <div class="stats">
        <div><b id="clock">--:--:--</b><span class="muted" id="date"></span></div>
        <div><b id="cpu">--</b><span class="muted">CPU load</span></div>
        <div><b id="traffic">--</b><span class="muted">Network</span></div>
        <div><b id="blocked">--</b><span class="muted">Threats blocked</span></div>
      </div>
    </header>

    <div class="grid">
      <section class="panel">
        <div class="panel-head">
          <div>
            <h2>GLOBAL THREAT MAP</h2>
            <div class="muted" id="mapSubtitle"></div>
          </div>
          <button id="btnGenerate" type="button">Generate demo data</button>
        </div>
        <div class="map-wrap">
          <canvas id="map"></canvas>
          <div id="tooltip"></div>
        </div>
      </section>

      <section class="panel">
        <div class="panel-head">
          <div>
            <h2>SYSTEM LOGS</h2>
            <div class="muted" id="logSubtitle"></div>
          </div>
          <select id="logFilter">
            <option value="all">all</option>
            <option value="critical">critical</option>
            <option value="error">error</option>
            <option value="warning">warning</option>
            <option value="info">info</option>
            <option value="debug">debug</option>
          </select>
        </div>
        <div id="logs"></div>
      </section>
    </div>

    <div id="drawer">
      <div class="card">
        <div class="panel-head" style="padding: 0 0 10px 0;">
          <h2 id="drawerTitle"></h2>
          <button id="btnClose" type="button">close</button>
        </div>
        <dl id="drawerBody"></dl>
        <pre id="drawerMeta"></pre>
      </div>
    </div>

    <script>
      const initial = __INITIAL_STATE__;

      const MAX_LOGS = 100;
      const SEVERITIES = ['critical', 'error', 'warning', 'info', 'debug'];
      const ACTIVITY_TYPES = ['intrusion', 'firewall', 'connection', 'scan', 'breach', 'traffic'];
      const SEVERITY_COLORS = {
        critical: '#ef4444',
        error: '#f97316',
        warning: '#eab308',
        info: '#3b82f6',
        debug: '#8b5cf6',
      };

      const mapCanvas = document.getElementById('map');
      const tooltip = document.getElementById('tooltip');
      const mapSubtitle = document.getElementById('mapSubtitle');
      const logsBox = document.getElementById('logs');
      const logSubtitle = document.getElementById('logSubtitle');
      const logFilter = document.getElementById('logFilter');
      const modeEl = document.getElementById('mode');
      const drawer = document.getElementById('drawer');

      let activities = initial.activities || [];
      let logs = initial.logs || [];
      let mapPoints = [];
      let streamTimer = null;
      let statsTimer = null;
      let clockTimer = null;

      // --- Local stub data (used when the backend is empty or unreachable) ---

      const stubSources = ['firewall', 'ids', 'vpn', 'auth', 'web-server', 'database', 'network', 'system'];
      const stubMessages = [
        'Authentication successful for user',
        'Failed login attempt detected',
        'Suspicious port scan detected from',
        'Firewall blocked connection to',
        'SSL certificate validation failed',
        'Database connection timeout',
        'API rate limit exceeded',
        'Malware signature detected',
        'Intrusion attempt blocked',
        'Network anomaly detected',
        'System backup completed',
        'Configuration updated',
      ];
      const stubAgents = [
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36',
        'curl/7.68.0',
        'python-requests/2.31.0',
        'Go-http-client/1.1',
      ];
      const stubHotspots = [
        ['USA', 'New York', 40.7128, -74.0060],
        ['USA', 'San Francisco', 37.7749, -122.4194],
        ['UK', 'London', 51.5074, -0.1278],
        ['France', 'Paris', 48.8566, 2.3522],
        ['Japan', 'Tokyo', 35.6762, 139.6503],
        ['Russia', 'Moscow', 55.7558, 37.6176],
        ['China', 'Beijing', 39.9042, 116.4074],
        ['Brazil', 'São Paulo', -23.5505, -46.6333],
        ['India', 'Mumbai', 19.0760, 72.8777],
        ['Germany', 'Berlin', 52.5200, 13.4050],
      ];
      const stubTitles = {
        intrusion: ['Unauthorized Access Attempt', 'Brute Force Attack'],
        firewall: ['Firewall Rule Triggered', 'IP Blacklist Hit'],
        connection: ['VPN Connection', 'SSH Session Started'],
        scan: ['Port Scan Detected', 'Vulnerability Scan'],
        breach: ['Data Exfiltration', 'System Compromise'],
        traffic: ['Bandwidth Monitor', 'Traffic Analysis'],
      };

      const pick = (arr) => arr[Math.floor(Math.random() * arr.length)];
      const clamp = (v, lo, hi) => Math.max(lo, Math.min(hi, v));
      const randomIp = () => [1 + Math.floor(Math.random() * 255), Math.floor(Math.random() * 256),
        Math.floor(Math.random() * 256), 1 + Math.floor(Math.random() * 255)].join('.');

      function stubLogEntry(ts) {
        const severity = pick(SEVERITIES);
        const ip = Math.random() > 0.3 ? randomIp() : null;
        let message = pick(stubMessages);
        if (ip && (message.endsWith('from') || message.endsWith('to'))) message = `${message} ${ip}`;
        if (severity === 'critical' || severity === 'error') message = `${severity.toUpperCase()}: ${message}`;
        const when = (ts || new Date()).toISOString();
        return {
          id: Math.floor(Math.random() * 10000) + 10000,
          timestamp: when,
          severity,
          source: pick(stubSources),
          message,
          ip_address: ip,
          user_agent: Math.random() > 0.7 ? pick(stubAgents) : null,
          created_at: when,
        };
      }

      function stubLogEntries(count) {
        const now = Date.now();
        const out = [];
        for (let i = 0; i < count; i++) {
          out.push(stubLogEntry(new Date(now - Math.random() * 24 * 3600000)));
        }
        return out.sort((a, b) => b.timestamp.localeCompare(a.timestamp));
      }

      function stubActivities(count) {
        const now = Date.now();
        const out = [];
        for (let i = 0; i < count; i++) {
          const [country, city, lat, lng] = pick(stubHotspots);
          const type = pick(ACTIVITY_TYPES);
          const ip = randomIp();
          const when = new Date(now - Math.random() * 12 * 3600000).toISOString();
          out.push({
            id: 2000 + i,
            latitude: clamp(lat + (Math.random() - 0.5) * 10, -90, 90),
            longitude: clamp(lng + (Math.random() - 0.5) * 20, -180, 180),
            activity_type: type,
            title: pick(stubTitles[type]),
            description: `Activity observed from ${ip} near ${city}, ${country}.`,
            ip_address: ip,
            port: Math.random() > 0.5 ? 1 + Math.floor(Math.random() * 65535) : null,
            country,
            city,
            severity: pick(SEVERITIES),
            timestamp: when,
            metadata: {
              protocol: Math.random() > 0.5 ? 'TCP' : 'UDP',
              bytes_transferred: Math.floor(Math.random() * 1000000),
              threat_score: Math.floor(Math.random() * 100),
            },
            created_at: when,
          });
        }
        return out.sort((a, b) => b.timestamp.localeCompare(a.timestamp));
      }

      // --- RPC ---

      async function rpcQuery(name, params) {
        const qs = new URLSearchParams();
        for (const [k, v] of Object.entries(params || {})) {
          if (v !== undefined && v !== null) qs.set(k, String(v));
        }
        const resp = await fetch(`/rpc/${name}?${qs.toString()}`);
        if (!resp.ok) throw new Error(`${name} failed (${resp.status})`);
        return resp.json();
      }

      async function rpcMutate(name, body) {
        const resp = await fetch(`/rpc/${name}`, {
          method: 'POST',
          headers: { 'content-type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (!resp.ok) throw new Error(`${name} failed (${resp.status})`);
        return resp.json();
      }

      // --- Rendering ---

      function escapeHtml(s) {
        return String(s ?? '')
          .replaceAll('&', '&amp;')
          .replaceAll('<', '&lt;')
          .replaceAll('>', '&gt;')
          .replaceAll('"', '&quot;')
          .replaceAll("'", '&#39;');
      }

      function fmtTime(ts) {
        return String(ts || '').slice(0, 19).replace('T', ' ');
      }

      function renderLogs() {
        const f = logFilter.value;
        const items = f === 'all' ? logs : logs.filter(l => l.severity === f);
        logSubtitle.textContent = `Live stream • ${logs.length} entries`;
        if (!items.length) {
          logsBox.innerHTML = '<div class="muted">No log entries.</div>';
          return;
        }
        logsBox.innerHTML = items.map(l => {
          const extra = [l.ip_address, l.user_agent].filter(Boolean).map(escapeHtml).join(' · ');
          return `<div class="log">
            <div class="meta">${escapeHtml(fmtTime(l.timestamp))} · ${escapeHtml(l.source)}</div>
            <div><span class="sev sev-${escapeHtml(l.severity)}">${escapeHtml(l.severity)}</span> ${escapeHtml(l.message)}</div>
            ${extra ? `<div class="meta">${extra}</div>` : ''}
          </div>`;
        }).join('');
      }

      // Equirectangular projection onto the canvas.
      function project(lat, lng, w, h) {
        return { x: ((lng + 180) / 360) * w, y: ((90 - lat) / 180) * h };
      }

      function drawMap() {
        const rect = mapCanvas.getBoundingClientRect();
        mapCanvas.width = Math.max(1, Math.floor(rect.width));
        mapCanvas.height = Math.max(1, Math.floor(rect.height));
        const ctx = mapCanvas.getContext('2d');
        if (!ctx) return;
        const w = mapCanvas.width;
        const h = mapCanvas.height;
        ctx.clearRect(0, 0, w, h);

        // Graticule every 30 degrees
        ctx.strokeStyle = 'rgba(34,197,94,0.15)';
        ctx.lineWidth = 1;
        for (let lng = -180; lng <= 180; lng += 30) {
          const p = project(0, lng, w, h);
          ctx.beginPath(); ctx.moveTo(p.x, 0); ctx.lineTo(p.x, h); ctx.stroke();
        }
        for (let lat = -90; lat <= 90; lat += 30) {
          const p = project(lat, 0, w, h);
          ctx.beginPath(); ctx.moveTo(0, p.y); ctx.lineTo(w, p.y); ctx.stroke();
        }

        // Rough continent outlines
        ctx.strokeStyle = 'rgba(34,197,94,0.35)';
        const outlines = [
          [[70, -165], [70, -60], [50, -55], [25, -80], [15, -95], [30, -115], [60, -140]],
          [[12, -80], [5, -50], [-5, -35], [-35, -55], [-55, -70], [-20, -75]],
          [[70, -10], [70, 40], [45, 40], [36, 25], [36, -10]],
          [[35, -15], [35, 30], [10, 50], [-35, 20], [5, -10]],
          [[75, 40], [75, 180], [60, 160], [35, 140], [10, 105], [20, 75], [35, 45]],
          [[-10, 115], [-10, 150], [-40, 150], [-35, 115]],
        ];
        for (const poly of outlines) {
          ctx.beginPath();
          poly.forEach(([lat, lng], i) => {
            const p = project(lat, lng, w, h);
            if (i === 0) ctx.moveTo(p.x, p.y); else ctx.lineTo(p.x, p.y);
          });
          ctx.closePath();
          ctx.stroke();
        }

        mapPoints = activities.map(a => ({ ...project(a.latitude, a.longitude, w, h), activity: a }));
        for (const pt of mapPoints) {
          const color = SEVERITY_COLORS[pt.activity.severity] || '#10b981';
          ctx.globalAlpha = 0.3;
          ctx.fillStyle = color;
          ctx.beginPath(); ctx.arc(pt.x, pt.y, 8, 0, Math.PI * 2); ctx.fill();
          ctx.globalAlpha = 1;
          ctx.beginPath(); ctx.arc(pt.x, pt.y, 3.5, 0, Math.PI * 2); ctx.fill();
        }

        mapSubtitle.textContent = `Real-time network activity • ${activities.length} active threats`;
      }

      function pointAt(ev) {
        const rect = mapCanvas.getBoundingClientRect();
        const x = ev.clientX - rect.left;
        const y = ev.clientY - rect.top;
        let best = null;
        let bestDist = 10;
        for (const pt of mapPoints) {
          const d = Math.hypot(pt.x - x, pt.y - y);
          if (d < bestDist) { best = pt; bestDist = d; }
        }
        return best;
      }

      function openDetails(a) {
        document.getElementById('drawerTitle').textContent = `${a.activity_type.toUpperCase()} • ${a.title}`;
        const rows = [
          ['Severity', a.severity],
          ['Description', a.description],
          ['IP address', a.ip_address + (a.port ? `:${a.port}` : '')],
          ['Location', [a.city, a.country].filter(Boolean).join(', ') || '—'],
          ['Coordinates', `${Number(a.latitude).toFixed(4)}, ${Number(a.longitude).toFixed(4)}`],
          ['Timestamp', fmtTime(a.timestamp)],
        ];
        document.getElementById('drawerBody').innerHTML = rows
          .map(([k, v]) => `<dt>${escapeHtml(k)}</dt><dd>${escapeHtml(v)}</dd>`).join('');
        document.getElementById('drawerMeta').textContent = a.metadata ? JSON.stringify(a.metadata, null, 2) : '';
        drawer.style.display = 'flex';
      }

      // --- Data flow ---

      function useStubs(reason) {
        if (reason) console.warn('Falling back to local stub data:', reason);
        modeEl.textContent = 'Procedurally generated data';
        if (!activities.length) activities = stubActivities(30);
        if (!logs.length) logs = stubLogEntries(50);
      }

      async function loadData() {
        try {
          const [acts, entries] = await Promise.all([
            rpcQuery('getNetworkActivities', { limit: 50 }),
            rpcQuery('getLogEntries', { limit: MAX_LOGS }),
          ]);
          activities = acts.length ? acts : stubActivities(30);
          logs = entries.length ? entries : stubLogEntries(50);
          modeEl.textContent = (acts.length && entries.length) ? 'Live data' : 'Procedurally generated data';
        } catch (e) {
          activities = [];
          logs = [];
          useStubs(e);
        }
        drawMap();
        renderLogs();
      }

      async function generateData() {
        try {
          await Promise.all([
            rpcMutate('generateDummyNetworkActivities', { count: 30, persist: true }),
            rpcMutate('generateDummyLogEntries', { count: 50, persist: true }),
          ]);
          await loadData();
        } catch (e) {
          activities = stubActivities(30);
          logs = stubLogEntries(50);
          useStubs(e);
          drawMap();
          renderLogs();
        }
      }

      async function streamLog() {
        let entry;
        try {
          entry = await rpcMutate('streamRandomLogEntry');
        } catch (e) {
          entry = stubLogEntry();
        }
        logs = [entry, ...logs.slice(0, MAX_LOGS - 1)];
        renderLogs();
      }

      function loadClass(v) {
        return v < 30 ? 'load-low' : (v < 70 ? 'load-mid' : 'load-high');
      }

      async function refreshStats() {
        const cpu = document.getElementById('cpu');
        const traffic = document.getElementById('traffic');
        const blocked = document.getElementById('blocked');
        let s;
        try {
          s = await rpcQuery('getSystemStats');
        } catch (e) {
          s = {
            cpu_percent: Math.random() * 100,
            bytes_recv: Math.random() * 1e9,
            threats_blocked: Number(blocked.textContent) || 0,
          };
        }
        cpu.textContent = `${Math.round(s.cpu_percent)}%`;
        cpu.className = loadClass(s.cpu_percent);
        traffic.textContent = `${(s.bytes_recv / 1e6).toFixed(0)} MB`;
        blocked.textContent = String(s.threats_blocked);
      }

      function tickClock() {
        const now = new Date();
        document.getElementById('clock').textContent = now.toLocaleTimeString('en-US', { hour12: false });
        document.getElementById('date').textContent = now.toLocaleDateString('en-US');
      }

      mapCanvas.addEventListener('mousemove', (ev) => {
        const pt = pointAt(ev);
        if (!pt) { tooltip.style.display = 'none'; return; }
        const a = pt.activity;
        tooltip.innerHTML = `<b>${escapeHtml(a.title)}</b><br>${escapeHtml(a.ip_address)}<br>` +
          `${escapeHtml([a.city, a.country].filter(Boolean).join(', '))}`;
        tooltip.style.left = `${pt.x + 12}px`;
        tooltip.style.top = `${pt.y + 12}px`;
        tooltip.style.display = 'block';
      });
      mapCanvas.addEventListener('mouseleave', () => { tooltip.style.display = 'none'; });
      mapCanvas.addEventListener('click', (ev) => {
        const pt = pointAt(ev);
        if (pt) openDetails(pt.activity);
      });
      document.getElementById('btnClose').addEventListener('click', () => { drawer.style.display = 'none'; });
      document.getElementById('btnGenerate').addEventListener('click', generateData);
      logFilter.addEventListener('change', renderLogs);
      window.addEventListener('resize', drawMap);

      window.addEventListener('beforeunload', () => {
        clearInterval(streamTimer);
        clearInterval(statsTimer);
        clearInterval(clockTimer);
      });

      // First paint from the server snapshot, then refresh through the RPC layer.
      if (!activities.length || !logs.length) useStubs();
      drawMap();
      renderLogs();
      loadData();

      tickClock();
      refreshStats();
      clockTimer = setInterval(tickClock, 1000);
      statsTimer = setInterval(refreshStats, 3000);
      // New simulated log entry every 2-5 seconds.
      streamTimer = setInterval(streamLog, Math.random() * 3000 + 2000);
    </script>
  </body>
</html>
"""

    return template.replace("__INITIAL_STATE__", json.dumps(initial_state).replace("</", "<\\/"))
