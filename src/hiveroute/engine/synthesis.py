"""Response synthesis for a single specialist.

``synthesize`` assembles a response from static knowledge tables keyed by the
template's family and the keywords it matched in the query. It never calls out
to a model, never raises, and returns the same text for the same inputs.
"""

from __future__ import annotations

from enum import StrEnum

from hiveroute.engine.scoring import keyword_hits
from hiveroute.engine.session import SessionView
from hiveroute.model.snapshot import ContextSnapshot, OperatingMode, TimeOfDay
from hiveroute.model.template import Family, SpecialistTemplate

MAX_GUIDANCE_LINES = 5
CLIPBOARD_MIN_CHARS = 15
LONG_SNIPPET_LINES = 50
HIGH_CPU = 70.0
LONG_SESSION_MIN = 90
VERY_LONG_SESSION_MIN = 180


class QueryIntent(StrEnum):
    """What a single query asks for."""

    HOW_TO = "how_to"
    DEBUGGING = "debugging"
    COMPARISON = "comparison"
    OPTIMIZATION = "optimization"
    GENERAL = "general"


QUERY_INTENT_TERMS: tuple[tuple[QueryIntent, tuple[str, ...]], ...] = (
    (
        QueryIntent.HOW_TO,
        ("cómo", "how", "crear", "create", "hacer", "build", "implementar"),
    ),
    (
        QueryIntent.DEBUGGING,
        ("error", "fix", "bug", "crash", "falla", "problema", "no funciona", "debug"),
    ),
    (
        QueryIntent.COMPARISON,
        ("vs", "mejor", "diferencia", "compare", "which", "cuál"),
    ),
    (
        QueryIntent.OPTIMIZATION,
        ("optimiz", "rápido", "faster", "performance", "rendimiento", "mejorar", "improve"),
    ),
)

GREETINGS: dict[TimeOfDay, str] = {
    TimeOfDay.MORNING: "Good morning",
    TimeOfDay.AFTERNOON: "Good afternoon",
    TimeOfDay.EVENING: "Good evening",
    TimeOfDay.NIGHT: "Good night",
    TimeOfDay.LATE_NIGHT: "🦉 Late-night session",
}

MODE_LINES: dict[OperatingMode, str] = {
    OperatingMode.DJ: "🎛️ DJ mode active",
    OperatingMode.PRODUCER: "🎛️ Producer mode active",
    OperatingMode.FOCUS: "🎯 Focus mode: concise answer",
    OperatingMode.ADHD: "🧠 ADHD mode: no extra noise",
}

# (trigger keywords, steps) per family
CODE_GUIDANCE: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"swift", "swiftui"}),
        (
            "1. Structure: `@Observable` classes (macOS 14+) over `@Published`",
            "2. Views: `some View` with local `@State`, `@Binding` for children",
            "3. Networking: `async let` for parallel requests",
            "4. Errors: `do/catch` with specific types, never `try!` in production",
        ),
    ),
    (
        frozenset({"react", "jsx", "hook"}),
        (
            "1. `useState` for local state, `useReducer` for complex state",
            "2. `useEffect` with a correct dependency array",
            "3. `useMemo`/`useCallback` only after measuring re-renders",
            "4. Server Components for data, Client Components for interactivity",
        ),
    ),
    (
        frozenset({"vue", "nuxt", "pinia"}),
        (
            "1. Composition API with `ref()` and `computed()`",
            "2. `defineProps` + `defineEmits` for components",
            "3. Pinia over Vuex for state management",
        ),
    ),
    (
        frozenset({"css", "tailwind", "flexbox", "grid"}),
        (
            "1. Custom properties such as `--color-primary` on `:root`",
            "2. `clamp()` for responsive sizing without media queries",
            "3. Grid over Flexbox for two-dimensional layouts",
        ),
    ),
    (
        frozenset({"python", "django", "flask", "fastapi"}),
        (
            "1. Type hints everywhere: `def f(x: int) -> str:`",
            "2. `dataclass` or `pydantic.BaseModel` for data structures",
            "3. `pathlib.Path` over `os.path`",
            "4. A lockfile-based dependency manager for reproducible installs",
        ),
    ),
    (
        frozenset({"node", "express"}),
        (
            "1. Validation middleware on every endpoint",
            "2. One global error handler",
            "3. Rate limiting and security headers",
        ),
    ),
    (
        frozenset({"rust", "cargo"}),
        (
            "1. `Result<T, E>` for errors, no `.unwrap()` in production",
            "2. `clippy` for automatic linting",
            "3. `#[derive(Debug, Clone)]` on plain data structs",
        ),
    ),
    (
        frozenset({"sql", "postgres", "mysql"}),
        (
            "1. Index the columns used in WHERE and JOIN",
            "2. `EXPLAIN ANALYZE` before optimizing",
            "3. Prepared statements against SQL injection",
        ),
    ),
    (
        frozenset({"redis", "cache"}),
        (
            "1. A TTL on every key",
            "2. `SCAN` instead of `KEYS *` in production",
            "3. Pub/Sub for cache invalidation",
        ),
    ),
    (
        frozenset({"auth", "oauth", "jwt"}),
        (
            "1. HTTPS everywhere with an HSTS header",
            "2. JWT: verify `exp`, `iss` and `aud`",
            "3. bcrypt or argon2 for passwords",
        ),
    ),
)

CREATIVE_GUIDANCE: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"ableton", "live", "audio", "midi"}),
        (
            "1. Gain staging: -6dB headroom on the master",
            "2. Subtractive EQ first, additive after",
            "3. Compression: 3:1 on buses, 4:1+ on drums",
            "4. Sidechain: Compressor > External Key > kick track",
        ),
    ),
    (
        frozenset({"mix", "master", "eq", "compressor"}),
        (
            "1. High-pass everything above 30Hz except kick and sub",
            "2. Ratio 3:1 on buses, 4:1+ on drums",
            "3. Limiter ceiling at -0.3dB for streaming",
        ),
    ),
    (
        frozenset({"figma", "design", "component", "auto layout"}),
        (
            "1. Auto Layout everywhere for responsive frames",
            "2. Design tokens for color, type and spacing",
            "3. Components with variants (state × size × theme)",
            "4. Smart Animate between variants for micro-interactions",
        ),
    ),
    (
        frozenset({"midjourney", "stable diffusion", "prompt"}),
        (
            "1. Structure: subject + style + lighting + camera + quality",
            "2. `--ar 16:9` for wide shots, `--ar 1:1` for square",
            "3. `--style raw` for less stylization",
            "4. Negative terms: blurry, deformed, low quality, watermark",
        ),
    ),
    (
        frozenset({"color", "palette", "contrast"}),
        (
            "1. Start from one base hue and derive the palette",
            "2. Check WCAG contrast for every text pairing",
            "3. Limit accents to one or two colors",
        ),
    ),
)

INFRA_GUIDANCE: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"docker", "container", "dockerfile"}),
        (
            "1. Multi-stage build: builder image, then a slim runtime image",
            "2. `.dockerignore` for `node_modules`, `.git` and docs",
            "3. Copy dependency manifests before `COPY . .` for layer caching",
            "4. `USER nonroot` in production",
        ),
    ),
    (
        frozenset({"kubernetes", "k8s", "helm"}),
        (
            "1. Always set `resources.requests` and `limits`",
            "2. `livenessProbe` + `readinessProbe`",
            "3. HPA for autoscaling on CPU or memory",
            "4. `NetworkPolicy` to segment pod traffic",
        ),
    ),
    (
        frozenset({"ci", "cd", "pipeline", "github actions"}),
        (
            "1. Build → Test → Lint → Security Scan → Deploy",
            "2. Cache dependencies between runs",
            "3. Matrix testing across versions",
            "4. Canary deploys: 5% → 25% → 100%",
        ),
    ),
    (
        frozenset({"monitoring", "observability", "prometheus", "grafana"}),
        (
            "1. RED metrics per service: Rate, Errors, Duration",
            "2. Structured JSON logs with correlation IDs",
            "3. Distributed tracing with OpenTelemetry",
            "4. Alert on SLOs rather than individual symptoms",
        ),
    ),
    (
        frozenset({"terraform", "iac"}),
        (
            "1. Remote state with locking",
            "2. Versioned, documented modules",
            "3. Always `plan` before `apply`",
            "4. Workspaces to separate dev, staging and prod",
        ),
    ),
)

RESEARCH_GUIDANCE: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"rag", "retrieval", "embedding", "vector"}),
        (
            "1. Chunk by semantic boundaries, not fixed sizes",
            "2. Evaluate retrieval separately from generation",
            "3. Re-rank the top results before building the context",
        ),
    ),
    (
        frozenset({"ml", "model", "train", "training"}),
        (
            "1. Fix a baseline and a held-out evaluation set first",
            "2. Track every run's data, config and metrics",
            "3. Change one variable per experiment",
        ),
    ),
    (
        frozenset({"data", "dataset", "analysis", "statistics"}),
        (
            "1. Profile the dataset: types, nulls, distributions",
            "2. Plot before you model",
            "3. Keep raw data immutable and derive from it",
        ),
    ),
)

BUSINESS_GUIDANCE: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"seo", "sitemap", "meta"}),
        (
            "1. One intent per page with a unique title and description",
            "2. Submit a sitemap and keep canonical URLs consistent",
            "3. Structured data for rich results",
        ),
    ),
    (
        frozenset({"sprint", "backlog", "scrum", "kanban"}),
        (
            "1. Keep the backlog ordered, not just labeled",
            "2. Size stories small enough to finish in a few days",
            "3. Review flow metrics in every retro",
        ),
    ),
    (
        frozenset({"product", "roadmap", "mvp"}),
        (
            "1. Write the problem statement before the solution",
            "2. Define one success metric per release",
            "3. Cut scope before moving dates",
        ),
    ),
)

WELLBEING_STEPS = (
    "1. 🫁 4-7-8 breathing: inhale 4s → hold 7s → exhale 8s",
    "2. 🧊 Cold water on the wrists for instant alertness",
    "3. 🚶 Five minutes of walking buys hours of focus",
    "4. 👁️ 20-20-20 rule: every 20 min, look 20 ft away for 20 s",
)

FAMILY_GUIDANCE: dict[Family, tuple[tuple[frozenset[str], tuple[str, ...]], ...]] = {
    Family.CODE: CODE_GUIDANCE,
    Family.CREATIVE: CREATIVE_GUIDANCE,
    Family.INFRA: INFRA_GUIDANCE,
    Family.RESEARCH: RESEARCH_GUIDANCE,
    Family.BUSINESS: BUSINESS_GUIDANCE,
}

DEBUG_STEPS: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"swift", "swiftui"}),
        (
            "3. `po variable` in LLDB to inspect state",
            "4. Thread Sanitizer for race conditions",
            "5. Instruments > Time Profiler for performance",
        ),
    ),
    (
        frozenset({"javascript", "react", "node"}),
        (
            "3. `console.trace()` for the full call stack",
            "4. DevTools > Sources > conditional breakpoints",
            "5. `node --inspect` to debug Node.js in DevTools",
        ),
    ),
    (
        frozenset({"python"}),
        (
            "3. `breakpoint()` at the failing line",
            "4. `python -m pytest -x --pdb` to debug inside tests",
            "5. `traceback.format_exc()` for detailed logs",
        ),
    ),
    (
        frozenset({"rust"}),
        (
            "3. `RUST_BACKTRACE=1` for the full backtrace",
            "4. `dbg!()` around the suspicious expression",
            "5. `cargo test -- --nocapture` to see output",
        ),
    ),
)

GENERIC_DEBUG_STEPS = (
    "3. Use your IDE's native debugger",
    "4. Add temporary logging to trace the flow",
    "5. Review recent changes with `git diff`",
)

COMPARISONS: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"react", "vue"}),
        (
            "**React vs Vue:**",
            "• React: larger ecosystem, more control, JSX",
            "• Vue: gentler learning curve, SFCs, template syntax",
            "• New teams: Vue. Scale: React.",
        ),
    ),
    (
        frozenset({"docker", "kubernetes", "k8s"}),
        (
            "**Docker vs Kubernetes:**",
            "• Docker packages. Kubernetes orchestrates.",
            "• Under 5 containers: Docker Compose is enough",
            "• Over 10 services with autoscaling: Kubernetes",
        ),
    ),
    (
        frozenset({"rest", "graphql"}),
        (
            "**REST vs GraphQL:**",
            "• REST: simple, cacheable, standard",
            "• GraphQL: flexible, less over-fetching",
            "• Simple CRUD: REST. Complex nested data: GraphQL",
        ),
    ),
    (
        frozenset({"postgres", "mysql"}),
        (
            "**Postgres vs MySQL:**",
            "• Postgres: JSON, extensions, advanced CTEs",
            "• MySQL: raw speed on simple reads",
        ),
    ),
)

OPTIMIZATION_TIPS: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"swift", "swiftui"}),
        (
            "1. Instruments > Time Profiler: measure first",
            "2. `@State` only in the view that needs it",
            "3. `.equatable()` to skip unchanged renders",
            "4. `LazyVStack`/`LazyHStack` for long lists",
            "5. `nonisolated` for methods that never touch UI",
        ),
    ),
    (
        frozenset({"react", "javascript"}),
        (
            "1. React DevTools Profiler to find wasted renders",
            "2. `React.memo()` + `useMemo` for expensive work",
            "3. `import()` for code splitting",
            "4. `IntersectionObserver` over scroll handlers",
            "5. `requestIdleCallback` for non-urgent work",
        ),
    ),
    (
        frozenset({"python"}),
        (
            "1. `cProfile` or `py-spy` for profiling",
            "2. numpy/pandas vectorization over loops",
            "3. `functools.lru_cache` for memoization",
            "4. `asyncio.gather()` for parallel I/O",
            "5. `__slots__` to cut per-instance memory",
        ),
    ),
    (
        frozenset({"docker", "kubernetes"}),
        (
            "1. Multi-stage builds for much smaller images",
            "2. `--no-cache` only when needed",
            "3. Alpine or distroless base images",
            "4. Health checks for automatic restarts",
            "5. Resource limits to avoid noisy neighbors",
        ),
    ),
)

GENERIC_OPTIMIZATION_TIPS = (
    "1. **Measure first**: never optimize without data",
    "2. Find the real bottleneck",
    "3. Optimize the hot path, not everything",
    "4. Cache where possible",
    "5. Parallelize I/O, not CPU",
)


def classify_query_intent(query: str) -> QueryIntent:
    """Classify a single query by bilingual term families."""
    for intent, terms in QUERY_INTENT_TERMS:
        if keyword_hits(terms, query):
            return intent
    return QueryIntent.GENERAL


def _first_table_match(
    keys: set[str], table: tuple[tuple[frozenset[str], tuple[str, ...]], ...]
) -> tuple[str, ...] | None:
    for triggers, lines in table:
        if triggers & keys:
            return lines
    return None


def _guidance(template: SpecialistTemplate, matched: list[str]) -> list[str]:
    if template.family is Family.WELLBEING:
        return list(WELLBEING_STEPS)
    table = FAMILY_GUIDANCE.get(template.family, ())
    lines: list[str] = []
    used: set[int] = set()
    for kw in matched:
        for index, (triggers, steps) in enumerate(table):
            if kw in triggers:
                if index not in used:
                    used.add(index)
                    lines.extend(steps)
                break
        else:
            lines.append(f"• Look at how {kw} fits your current {template.domain} setup")
    if not lines:
        lines.append(f"Describe your {template.domain} case in more detail for specific guidance")
    return lines[:MAX_GUIDANCE_LINES]


def _language_keys(template: SpecialistTemplate, matched: list[str]) -> set[str]:
    return set(matched) | set(template.species.split("."))


def _debug_advice(template: SpecialistTemplate, matched: list[str], has_clip: bool) -> list[str]:
    lines = [
        "1. **Reproduce**: isolate the smallest failing case",
        "2. **Read** the whole error: stack trace, line and context",
    ]
    specific = _first_table_match(_language_keys(template, matched), DEBUG_STEPS)
    lines.extend(specific or GENERIC_DEBUG_STEPS)
    if has_clip:
        lines.append("📋 The clipboard looks relevant: see the analysis below")
    return lines


def _comparison(template: SpecialistTemplate, matched: list[str]) -> list[str]:
    keys = set(matched)
    lines: list[str] = []
    for triggers, rows in COMPARISONS:
        if triggers & keys:
            lines.extend(rows)
    if not lines:
        lines.append(
            f"Name the technologies you want compared for a detailed {template.domain} analysis"
        )
    return lines


def _optimization(template: SpecialistTemplate, matched: list[str]) -> list[str]:
    tips = _first_table_match(_language_keys(template, matched), OPTIMIZATION_TIPS)
    return list(tips or GENERIC_OPTIMIZATION_TIPS)


def analyze_clipboard(clipboard: str | None, keywords: tuple[str, ...]) -> str | None:
    """Summarize recognizable code or markup in clipboard text.

    Only runs when the clipboard is longer than 15 characters and mentions at
    least one of the template's keywords.

    Returns:
        Findings joined by newlines, or None when nothing applies.
    """
    if not clipboard or len(clipboard) <= CLIPBOARD_MIN_CHARS:
        return None
    if not keyword_hits(keywords, clipboard):
        return None

    lowered = clipboard.lower()
    findings: list[str] = []

    swift_markers = "@State" in clipboard or "var body" in clipboard
    if ("func " in clipboard and "->" in clipboard) or swift_markers:
        findings.append("Language detected: **Swift**")
        if "@State" in clipboard or "@Published" in clipboard:
            findings.append("• SwiftUI state management")
        if "Task {" in clipboard or "async " in clipboard:
            findings.append("• async/await code")
        if "try " in clipboard and "catch" not in clipboard:
            findings.append("⚠️ `try` without `catch`: possible crash")
    elif "def " in clipboard or ("import " in clipboard and ":" in clipboard):
        findings.append("Language detected: **Python**")
        if "except:" in clipboard or "except Exception" in clipboard:
            findings.append("⚠️ Broad except: catch a specific exception")
    elif "const " in clipboard or "=>" in clipboard or "require(" in clipboard:
        findings.append("Language detected: **JavaScript/TypeScript**")
        if "var " in clipboard:
            findings.append("⚠️ `var` found: prefer `const` or `let`")
        if keyword_hits(("any",), clipboard):
            findings.append("⚠️ `any` found: type safety lost")
    elif "fn " in clipboard and "let " in clipboard:
        findings.append("Language detected: **Rust**")
        if "unwrap()" in clipboard:
            findings.append("⚠️ `.unwrap()` found: use `?` or `match` in production")
    elif "</" in clipboard or "<div" in lowered or "<!doctype" in lowered:
        findings.append("Markup detected: **HTML**")

    line_count = len(clipboard.splitlines())
    if line_count > LONG_SNIPPET_LINES:
        findings.append(f"📏 {line_count} lines: consider splitting into smaller functions")
    if "todo" in lowered or "fixme" in lowered or "hack" in lowered:
        findings.append("📌 TODO/FIXME markers in the code")
    if "print(" in clipboard or "console.log" in clipboard or "NSLog" in clipboard:
        findings.append("🧹 Debug prints: clean up before production")
    if "as!" in clipboard or "try!" in clipboard:
        findings.append("⚠️ Force unwrap/cast: crash risk")

    return "\n".join(findings) if findings else None


def _previous_queries(query: str, session: SessionView, limit: int = 3) -> list[str]:
    history = list(session.recent_queries)
    if history and history[-1] == query:
        history.pop()
    return history[-limit:]


def synthesize(
    template: SpecialistTemplate,
    query: str,
    snapshot: ContextSnapshot,
    session: SessionView,
) -> str:
    """Build the response text for one specialist.

    Args:
        template: Specialist producing the response.
        query: Raw user query.
        snapshot: Ambient context for this query.
        session: Session view captured at query start.

    Returns:
        Non-empty response text.
    """
    matched = keyword_hits(template.keywords, query)
    topic = ", ".join(matched[:3]) if matched else template.domain
    clip_notes = analyze_clipboard(snapshot.clipboard_text, template.keywords)

    parts = [f"{template.emoji} **{template.label}** · {GREETINGS[snapshot.time_of_day]}"]
    if snapshot.active_app_name:
        parts.append(f"📍 Working in **{snapshot.active_app_name}**")
    if session.mode in MODE_LINES:
        parts.append(MODE_LINES[session.mode])
    if matched:
        parts.append(f"🎯 Detected: **{topic}**")

    intent = classify_query_intent(query)
    if intent is QueryIntent.HOW_TO:
        heading = f"**Step by step for {topic}:**"
        body = _guidance(template, matched)
    elif intent is QueryIntent.DEBUGGING:
        heading = f"**🔧 Diagnosis for {topic}:**"
        body = _debug_advice(template, matched, clip_notes is not None)
    elif intent is QueryIntent.COMPARISON:
        heading = "**⚖️ Comparison:**"
        body = _comparison(template, matched)
    elif intent is QueryIntent.OPTIMIZATION:
        heading = f"**⚡ Optimizing {topic}:**"
        body = _optimization(template, matched)
    else:
        heading = f"**{template.domain} in context:**"
        body = _guidance(template, matched)
    parts.append("\n" + heading + "\n" + "\n".join(body))

    if clip_notes:
        parts.append("\n📋 **Clipboard analysis:**\n" + clip_notes)

    previous = [q.lower() for q in _previous_queries(query, session)]
    if matched and any(kw in prev for prev in previous for kw in matched):
        parts.append("\n🔄 Continuing an earlier topic")

    if snapshot.cpu_load > HIGH_CPU:
        parts.append(f"⚠️ CPU at {int(snapshot.cpu_load)}%: heavy load detected")
    minutes = session.session_minutes
    if minutes > VERY_LONG_SESSION_MIN:
        parts.append(f"🔴 {minutes} minutes in session: take a break now")
    elif minutes > LONG_SESSION_MIN:
        parts.append(f"🟡 {minutes} minutes in session: consider a break")
    if snapshot.is_playing and snapshot.current_track:
        track = snapshot.current_track
        if snapshot.current_artist:
            track = f"{track} by {snapshot.current_artist}"
        parts.append(f"🎵 Listening to: {track}")

    return "\n".join(parts)
