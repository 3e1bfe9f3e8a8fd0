"""Static domain-family tables for the default specialist catalog.

Each family is a plain table of rows; ``*_templates()`` functions turn the rows
into fresh ``SpecialistTemplate`` instances so every catalog owns its own
mutable fitness state.
"""

from __future__ import annotations

from hiveroute.model.template import SpecialistTemplate

IDE_BUNDLES = frozenset(
    {
        "com.apple.dt.Xcode",
        "com.microsoft.VSCode",
        "com.todesktop.230510fqmkbjh6g",  # Cursor
        "dev.warp.warp-stable",
        "com.apple.Terminal",
        "com.googlecode.iterm2",
    }
)

CODE_BASE_KEYWORDS = ("code", "program", "develop", "software", "engineer")

# (language, emoji, keywords)
LANGUAGES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    (
        "Swift",
        "🦅",
        (
            "swift", "swiftui", "uikit", "appkit", "xcode", "combine", "async",
            "await", "actor", "@state", "@published", "observable", "spm",
            "cocoapods", "xctest",
        ),
    ),
    (
        "Python",
        "🐍",
        (
            "python", "pip", "django", "flask", "fastapi", "numpy", "pandas",
            "torch", "tensorflow", "jupyter", "virtualenv", "pytest", "decorator",
            "yield", "asyncio",
        ),
    ),
    (
        "JavaScript",
        "⚡",
        (
            "javascript", "js", "node", "npm", "react", "vue", "angular", "next.js",
            "express", "webpack", "vite", "typescript", "deno", "bun", "jest",
        ),
    ),
    (
        "Rust",
        "🦀",
        (
            "rust", "cargo", "ownership", "borrow", "lifetime", "unsafe", "trait",
            "impl", "tokio", "wasm", "serde", "actix",
        ),
    ),
    (
        "Go",
        "🐹",
        ("golang", "go", "goroutine", "channel", "defer", "interface", "gin", "fiber"),
    ),
    (
        "SQL",
        "🗃️",
        (
            "sql", "select", "join", "index", "query", "postgres", "mysql", "sqlite",
            "migration", "schema", "orm", "prisma", "drizzle",
        ),
    ),
    (
        "Shell",
        "💻",
        (
            "bash", "zsh", "shell", "terminal", "cli", "grep", "awk", "sed", "pipe",
            "chmod", "cron",
        ),
    ),
    (
        "HTML/CSS",
        "🎨",
        (
            "html", "css", "flexbox", "grid", "responsive", "media query", "sass",
            "tailwind", "animation", "transition",
        ),
    ),
    (
        "Solidity",
        "⛓️",
        (
            "solidity", "contract", "ethereum", "web3", "erc20", "erc721",
            "hardhat", "foundry", "abi",
        ),
    ),
    (
        "C++",
        "⚙️",
        ("cpp", "c++", "pointer", "template", "stl", "cmake", "makefile", "header"),
    ),
    (
        "Kotlin",
        "🟣",
        ("kotlin", "android", "jetpack", "compose", "coroutine", "flow", "ktor"),
    ),
    (
        "PHP",
        "🐘",
        ("php", "laravel", "composer", "artisan", "blade", "eloquent", "symfony"),
    ),
    (
        "Ruby",
        "💎",
        ("ruby", "rails", "gem", "bundler", "rake", "rspec", "sinatra"),
    ),
    (
        "Dart",
        "🎯",
        ("dart", "flutter", "widget", "pubspec", "riverpod"),
    ),
)

# specialization -> gerund
SPECIALTIES: tuple[tuple[str, str], ...] = (
    ("debug", "debugging"),
    ("optimize", "optimizing"),
    ("refactor", "refactoring"),
    ("test", "testing"),
    ("architecture", "architecting"),
    ("patterns", "patterning"),
)

# (species, emoji, domain, keywords, affinities)
CREATIVE: tuple[tuple[str, str, str, tuple[str, ...], tuple[str, ...]], ...] = (
    (
        "creative.midjourney", "🖼", "Midjourney Prompts",
        ("midjourney", "imagine", "prompt", "render", "concept art", "--ar", "--v 6",
         "--style raw", "composition", "lighting"),
        ("com.hnc.Discord",),
    ),
    (
        "creative.suno", "🎵", "Music Generation",
        ("suno", "udio", "song", "lyrics", "melody", "beat", "bpm", "genre", "tempo",
         "chorus", "verse"),
        (),
    ),
    (
        "creative.runway", "📹", "Video Generation",
        ("runway", "gen-3", "video", "motion", "animate", "camera movement", "dolly",
         "pan", "edit"),
        (),
    ),
    (
        "creative.dalle", "🎨", "Image Generation",
        ("dall-e", "dalle", "image", "generate", "visual", "illustration", "concept",
         "style transfer"),
        (),
    ),
    (
        "creative.color", "🌈", "Color Theory",
        ("color", "palette", "hex", "rgb", "hsl", "gradient", "contrast",
         "complementary", "analogous", "triadic"),
        (),
    ),
    (
        "creative.typography", "🔤", "Typography",
        ("font", "typeface", "typography", "serif", "sans-serif", "weight",
         "line-height", "kerning", "tracking"),
        (),
    ),
    (
        "creative.3d", "🧊", "3D Modeling",
        ("3d", "blender", "three.js", "webgl", "glb", "gltf", "mesh", "texture",
         "shader", "raytracing"),
        (),
    ),
    (
        "creative.audio", "🎧", "Audio Engineering",
        ("mix", "master", "eq", "compressor", "reverb", "delay", "sidechain",
         "stereo", "lufs", "frequency"),
        ("com.ableton.live", "com.apple.logicpro"),
    ),
    (
        "creative.motion", "✨", "Motion Design",
        ("animation", "keyframe", "easing", "spring", "physics", "parallax",
         "lottie", "rive", "after effects"),
        (),
    ),
    (
        "creative.branding", "🏷️", "Brand Identity",
        ("brand", "identity", "logo", "visual language", "guideline", "mood board",
         "tone", "voice"),
        (),
    ),
)

INFRA: tuple[tuple[str, str, str, tuple[str, ...], tuple[str, ...]], ...] = (
    (
        "infra.docker", "🐳", "Docker & Containers",
        ("docker", "container", "dockerfile", "compose", "image", "volume",
         "network", "registry"),
        ("com.apple.Terminal",),
    ),
    (
        "infra.kubernetes", "☸️", "Kubernetes",
        ("kubernetes", "k8s", "pod", "deployment", "service", "ingress", "helm",
         "kubectl", "minikube"),
        (),
    ),
    (
        "infra.ci", "🔄", "CI/CD Pipelines",
        ("ci", "cd", "pipeline", "github actions", "jenkins", "circleci",
         "gitlab ci", "workflow", "artifact"),
        (),
    ),
    (
        "infra.cloud.aws", "☁️", "AWS",
        ("aws", "s3", "ec2", "lambda", "dynamo", "cloudfront", "iam", "vpc", "ecs",
         "fargate", "cloudwatch"),
        (),
    ),
    (
        "infra.cloud.gcp", "🌩️", "Google Cloud",
        ("gcp", "firebase", "cloud run", "cloud functions", "bigquery", "pubsub",
         "spanner", "gke"),
        (),
    ),
    (
        "infra.cloud.azure", "🔵", "Azure",
        ("azure", "blob", "cosmos", "app service", "functions", "devops",
         "active directory"),
        (),
    ),
    (
        "infra.terraform", "🏗️", "Infrastructure as Code",
        ("terraform", "iac", "pulumi", "cloudformation", "ansible", "state", "plan",
         "apply", "module"),
        (),
    ),
    (
        "infra.monitoring", "📊", "Monitoring & Observability",
        ("monitoring", "prometheus", "grafana", "datadog", "new relic", "alert",
         "metric", "trace", "log", "sentry"),
        (),
    ),
    (
        "infra.networking", "📡", "Networking",
        ("network", "dns", "cdn", "load balancer", "proxy", "nginx",
         "reverse proxy", "ssl", "tls", "firewall", "vpn"),
        (),
    ),
    (
        "infra.security", "🔐", "Security Engineering",
        ("security", "audit", "penetration", "owasp", "cve", "vulnerability",
         "encryption", "zero trust", "rbac"),
        (),
    ),
)

# (species, emoji, domain, keywords)
RESEARCH: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("research.data", "📊", "Data Science",
     ("data", "dataset", "analysis", "statistics", "regression", "classification",
      "clustering", "pca", "feature")),
    ("research.ml", "🤖", "Machine Learning",
     ("ml", "model", "train", "inference", "neural", "transformer", "llm",
      "fine-tune", "rlhf", "embedding")),
    ("research.nlp", "💬", "NLP",
     ("nlp", "natural language", "tokenize", "sentiment", "ner", "bert", "gpt",
      "prompt engineering", "rag")),
    ("research.cv", "👁️", "Computer Vision",
     ("vision", "image", "detection", "segmentation", "yolo", "cnn", "resnet",
      "diffusion")),
    ("research.math", "🔢", "Mathematics",
     ("math", "equation", "integral", "derivative", "matrix", "probability",
      "bayesian", "statistics")),
    ("research.crypto", "🔐", "Cryptography",
     ("crypto", "hash", "encrypt", "decrypt", "aes", "rsa", "ed25519",
      "zero knowledge", "zkp")),
)

BUSINESS: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("biz.writing", "✍️", "Technical Writing",
     ("write", "document", "readme", "article", "blog", "copy", "headline", "pitch",
      "newsletter")),
    ("biz.marketing", "📢", "Digital Marketing",
     ("marketing", "seo", "sem", "growth", "funnel", "conversion", "ab test",
      "analytics", "campaign")),
    ("biz.finance", "💰", "Finance & Markets",
     ("price", "market", "stock", "crypto", "trading", "portfolio", "roi",
      "revenue", "profit", "valuation")),
    ("biz.legal", "⚖️", "Legal & Compliance",
     ("license", "gdpr", "privacy policy", "terms", "copyright", "patent",
      "compliance", "regulation")),
    ("biz.pm", "📋", "Project Management",
     ("sprint", "backlog", "kanban", "scrum", "velocity", "standup", "retro",
      "epic", "story", "task")),
    ("biz.product", "🎯", "Product Strategy",
     ("product", "roadmap", "mvp", "user story", "persona", "market fit", "pivot",
      "metrics", "okr", "kpi")),
)

WELLBEING: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("well.focus", "🧘", "Focus & Flow",
     ("focus", "concentrate", "pomodoro", "deep work", "flow state", "distraction",
      "mindful")),
    ("well.health", "💚", "Developer Health",
     ("tired", "break", "rest", "posture", "eyes", "stretch", "ergonomic",
      "burnout")),
    ("well.energy", "⚡", "Energy Management",
     ("energy", "coffee", "sleep", "nap", "circadian", "productivity", "peak",
      "ultradian")),
    ("well.mood", "🌡️", "Mood & Stress",
     ("stressed", "anxious", "calm", "breathe", "meditation", "gratitude",
      "journal")),
)

LOCALIZED: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("lang.es.code", "🇪🇸", "Código en Español",
     ("código", "función", "variable", "clase", "método", "error", "compilar",
      "optimizar", "depurar")),
    ("lang.es.creative", "🇪🇸", "Creativo en Español",
     ("diseñar", "crear", "arte", "estilo", "concepto", "generar", "visual",
      "componer")),
    ("lang.es.biz", "🇪🇸", "Negocios en Español",
     ("negocio", "proyecto", "estrategia", "mercado", "ventas", "cliente",
      "factura", "presupuesto")),
    ("lang.translate", "🌍", "Translation",
     ("translate", "traducir", "idioma", "language", "localize", "i18n", "l10n")),
)

# (species, label, emoji, domain, keywords, affinities)
STACK: tuple[tuple[str, str, str, str, tuple[str, ...], tuple[str, ...]], ...] = (
    # Web
    ("code.web.react", "ReactPro", "⚛️", "React",
     ("react", "jsx", "hook", "usestate", "useeffect", "component", "redux",
      "next.js", "nextjs"), ()),
    ("code.web.vue", "VueMaster", "💚", "Vue.js",
     ("vue", "nuxt", "composition api", "ref", "reactive", "pinia", "vuex"), ()),
    ("code.web.css", "CSSWizard", "🎭", "CSS Architecture",
     ("css", "flexbox", "grid", "container query", "cascade layer", "subgrid",
      "nesting", "has()"), ()),
    ("code.web.a11y", "A11yGuard", "♿", "Accessibility",
     ("accessibility", "a11y", "aria", "screen reader", "wcag", "contrast",
      "focus", "semantic"), ()),
    ("code.web.svg", "SVGsmith", "🖌️", "SVG & Icons",
     ("svg", "icon", "vector", "path", "viewbox", "sprite", "stroke"), ()),
    ("code.web.animation", "AnimPro", "🎬", "Web Animations",
     ("animation", "framer", "gsap", "lottie", "spring", "keyframe", "rive",
      "motion"), ()),
    ("code.web.pwa", "PWAPro", "📱", "Progressive Web Apps",
     ("pwa", "service worker", "manifest", "offline", "cache", "installable",
      "push notification"), ()),
    ("code.web.perf", "WebPerfPro", "🚀", "Web Performance",
     ("lighthouse", "core web vitals", "lcp", "fid", "cls", "ttfb", "bundle",
      "tree shake"), ()),
    ("code.web.testing", "TestPro", "🧪", "Testing",
     ("test", "jest", "vitest", "cypress", "playwright", "testing library", "mock",
      "assertion", "coverage"), ()),
    ("code.web.graphql", "GraphQLPro", "◻️", "GraphQL",
     ("graphql", "query", "mutation", "subscription", "resolver", "schema",
      "apollo", "relay"), ()),
    ("code.web.typescript", "TypescriptPro", "🔷", "TypeScript",
     ("typescript", "ts", "type", "interface", "generic", "union",
      "discriminated", "infer", "zod"), ()),
    ("code.web.wasm", "WASMPro", "⚙️", "WebAssembly",
     ("wasm", "webassembly", "emscripten", "wasi", "assemblyscript",
      "wasm-bindgen"), ()),
    # Backend
    ("code.backend.rust", "RustPro", "🦀", "Rust Backend",
     ("rust", "cargo", "ownership", "borrow", "lifetime", "tokio", "wasm", "unsafe",
      "trait"), ()),
    ("code.backend.go", "GoPro", "🐹", "Go Backend",
     ("golang", "go", "goroutine", "channel", "defer", "interface", "gin",
      "cobra"), ()),
    ("code.backend.python", "PythonPro", "🐍", "Python Backend",
     ("python", "pip", "django", "flask", "fastapi", "pandas", "numpy", "decorator",
      "asyncio", "pytest"), ()),
    ("code.backend.kotlin", "KotlinPro", "🟣", "Kotlin Backend",
     ("kotlin", "android", "compose", "coroutine", "flow", "ktor", "jetpack"), ()),
    ("code.backend.laravel", "PHPLaravel", "🐘", "PHP & Laravel",
     ("php", "laravel", "artisan", "eloquent", "blade", "migration", "middleware",
      "composer"), ()),
    ("code.backend.elixir", "ElixirPro", "💜", "Elixir",
     ("elixir", "phoenix", "genserver", "beam", "erlang", "otp", "liveview",
      "ecto"), ()),
    ("code.backend.design", "SystemDesign", "🏛️", "System Design",
     ("system design", "architecture", "microservice", "monolith", "cqrs",
      "event sourcing", "saga"), ()),
    ("code.backend.queues", "MessageQueue", "📬", "Message Queues",
     ("queue", "kafka", "rabbitmq", "redis", "pubsub", "event", "consumer",
      "producer"), ()),
    ("code.backend.cache", "CachePro", "⚡", "Caching",
     ("cache", "redis", "memcached", "cdn", "invalidation", "ttl", "lru",
      "stale"), ()),
    ("code.backend.auth", "AuthPro", "🔑", "Authentication",
     ("auth", "oauth", "jwt", "session", "passkey", "webauthn", "saml", "oidc",
      "login"), ()),
    ("code.backend.email", "EmailPro", "📧", "Email Systems",
     ("email", "smtp", "sendgrid", "resend", "mailgun", "dkim", "spf", "dmarc",
      "deliverability"), ()),
    ("code.backend.payments", "StripePayments", "💳", "Payments & Stripe",
     ("stripe", "payment", "checkout", "subscription", "invoice", "webhook",
      "pci"), ()),
    ("code.web3.contracts", "SmartContract", "📜", "Smart Contracts",
     ("solidity", "contract", "erc20", "erc721", "hardhat", "foundry",
      "reentrancy"), ()),
    ("code.apple.visionos", "AppleVision", "🥽", "visionOS & AR",
     ("visionos", "ar", "arkit", "realitykit", "spatial", "immersive",
      "reality composer"), ("com.apple.dt.Xcode",)),
    ("code.gamedev", "GameDev", "🎮", "Game Development",
     ("game", "unity", "unreal", "godot", "sprite", "gameloop", "physics",
      "collision"), ()),
    # AI
    ("research.ai.llm", "LLMPro", "🤖", "LLM Engineering",
     ("llm", "gpt", "claude", "gemini", "prompt", "fine-tune", "rag", "embedding",
      "token"), ()),
    ("research.ai.rag", "RAGPro", "📚", "RAG Systems",
     ("rag", "retrieval", "vector", "embedding", "chunk", "pinecone", "chroma",
      "weaviate"), ()),
    ("research.ai.agents", "AgentPro", "🕵️", "AI Agents",
     ("agent", "tool use", "function calling", "langchain", "crew", "autogen",
      "swarm"), ()),
    ("research.ai.mlops", "MLOpsPro", "🔧", "MLOps",
     ("mlops", "pipeline", "model", "deploy", "inference", "onnx", "mlflow",
      "wandb", "training"), ()),
    ("research.ai.vision", "ComputerVision", "👁️", "Computer Vision",
     ("vision", "image", "detection", "segmentation", "yolo", "cnn", "diffusion",
      "opencv"), ()),
    ("research.ai.nlp", "NLPPro", "💬", "NLP",
     ("nlp", "tokenize", "sentiment", "ner", "bert", "transformer", "text",
      "classify"), ()),
    ("research.ai.prompting", "PromptEng", "✏️", "Prompt Engineering",
     ("prompt", "system prompt", "few-shot", "chain of thought", "cot",
      "instruction", "template"), ()),
    ("research.ai.diffusion", "DiffusionPro", "🖼️", "Image Generation",
     ("stable diffusion", "sdxl", "flux", "comfyui", "controlnet", "lora",
      "inpaint"), ()),
    ("research.ai.audio", "AudioAI", "🔊", "Audio AI",
     ("whisper", "tts", "speech", "voice", "elevenlabs", "bark", "music gen",
      "audio"), ()),
    ("research.ai.edge", "EdgeAI", "📲", "Edge AI",
     ("coreml", "tflite", "onnx", "edge", "on-device", "quantize", "prune",
      "mobile"), ()),
    # Ops
    ("infra.ops.terraform", "TerraformPro", "🏗️", "Terraform",
     ("terraform", "hcl", "state", "plan", "apply", "module", "provider", "iac"), ()),
    ("infra.ops.actions", "GithubActions", "🔄", "GitHub Actions",
     ("github actions", "workflow", "ci/cd", "yaml", "runner", "artifact",
      "matrix"), ()),
    ("infra.ops.nginx", "NginxPro", "🌐", "Nginx & Reverse Proxy",
     ("nginx", "reverse proxy", "load balance", "upstream", "ssl", "certbot"), ()),
    ("infra.ops.linux", "LinuxPro", "🐧", "Linux Administration",
     ("linux", "ubuntu", "systemd", "journalctl", "iptables", "cgroup", "mount"),
     ("com.apple.Terminal", "com.googlecode.iterm2")),
    ("infra.ops.postgres", "PostgresPro", "🐘", "PostgreSQL Deep",
     ("postgres", "postgresql", "explain analyze", "vacuum", "replication",
      "pgbouncer", "materialized"), ()),
    ("infra.ops.elastic", "ElasticPro", "🔎", "Elasticsearch",
     ("elasticsearch", "elastic", "kibana", "index", "mapping", "aggregation",
      "full text"), ()),
    ("infra.ops.observability", "ObservePro", "📊", "Observability",
     ("observability", "tracing", "metrics", "logging", "opentelemetry", "jaeger",
      "prometheus", "grafana"), ()),
    ("infra.ops.aws", "AWSPro", "☁️", "AWS Services",
     ("aws", "s3", "ec2", "lambda", "dynamodb", "cloudfront", "iam", "sqs", "sns",
      "ecs"), ()),
    ("infra.ops.gcp", "GCPPro", "🌩️", "Google Cloud Services",
     ("gcp", "cloud run", "firebase", "bigquery", "pubsub", "spanner", "vertex"), ()),
    ("infra.ops.vercel", "VercelPro", "▲", "Vercel & Edge",
     ("vercel", "edge", "serverless", "isr", "ssg", "ssr", "middleware",
      "turbopack"), ()),
    ("infra.ops.enterprise", "AccessPro", "🏢", "Enterprise Architecture",
     ("enterprise", "soa", "middleware", "erp", "integration", "gateway",
      "api management"), ()),
    # Security
    ("infra.sec.owasp", "OWASPPro", "🛡️", "OWASP Security",
     ("owasp", "injection", "xss", "csrf", "ssrf", "broken auth", "insecure"), ()),
    ("infra.sec.pentest", "PentestPro", "🥷", "Penetration Testing",
     ("pentest", "burp", "nmap", "metasploit", "recon", "exploit", "ctf"), ()),
    ("infra.sec.crypto", "CryptoPro", "🔐", "Applied Cryptography",
     ("encrypt", "decrypt", "hash", "aes", "rsa", "ed25519", "hmac", "salt",
      "derive"), ()),
    # Creative tools
    ("creative.tool.threejs", "ThreeJSPro", "🌐", "Three.js & WebGL",
     ("three.js", "threejs", "webgl", "shader", "glsl", "3d", "scene", "mesh",
      "raycaster"), ()),
    ("creative.tool.ableton", "AbletonPro", "🎹", "Ableton Live",
     ("ableton", "live", "clip", "arrangement", "warping", "rack", "return"),
     ("com.ableton.live",)),
    ("creative.tool.figma", "FigmaPro", "🎨", "Figma Design",
     ("figma", "auto layout", "component", "variant", "token", "prototype",
      "frame"), ("com.figma.Desktop",)),
    ("creative.tool.blender", "BlenderPro", "🧊", "Blender 3D",
     ("blender", "sculpt", "texture", "material", "render", "cycles", "eevee",
      "uv"), ("org.blenderfoundation.blender",)),
    ("creative.tool.davinci", "DaVinciPro", "🎬", "DaVinci Resolve",
     ("davinci", "resolve", "color grade", "fusion", "fairlight", "node", "lut"),
     ("com.blackmagic-design.DaVinciResolve",)),
    ("creative.tool.aftereffects", "AfterFX", "✨", "After Effects & Motion",
     ("after effects", "keyframe", "expression", "lottie", "bodymovin", "wiggle"),
     ("com.adobe.AfterEffects",)),
    # Domain
    ("biz.trading", "CryptoTrader", "📈", "Crypto Trading",
     ("trading", "candle", "rsi", "macd", "fibonacci", "support", "resistance",
      "dex"), ()),
    ("biz.docs", "MarkdownPro", "📝", "Markdown & Docs",
     ("markdown", "readme", "documentation", "docusaurus", "mdx", "changelog",
      "contributing"), ()),
    ("biz.seo", "SEOPro", "🔍", "SEO",
     ("seo", "sitemap", "robots.txt", "meta", "schema", "structured data",
      "canonical", "alt text"), ()),
    ("lang.es.dev", "SpanishCoder", "🇪🇸", "Desarrollo en Español",
     ("código", "función", "variable", "error", "compilar", "depurar",
      "arquitectura", "patrón", "módulo"), ()),
)


def code_templates() -> list[SpecialistTemplate]:
    """Language specialists plus six generated sub-specialties each."""
    templates: list[SpecialistTemplate] = []
    for language, emoji, keywords in LANGUAGES:
        slug = language.lower()
        templates.append(
            SpecialistTemplate(
                species=f"code.{slug}",
                label=language,
                domain=f"{language} Development",
                keywords=CODE_BASE_KEYWORDS + keywords,
                affinities=IDE_BUNDLES,
                emoji=emoji,
            )
        )
        for term, gerund in SPECIALTIES:
            title = f"{language} {term.capitalize()}"
            templates.append(
                SpecialistTemplate(
                    species=f"code.{slug}.{term}",
                    label=title,
                    domain=title,
                    keywords=keywords + (term, gerund),
                    affinities=IDE_BUNDLES,
                    emoji=emoji,
                )
            )
    return templates


def _with_affinities(
    rows: tuple[tuple[str, str, str, tuple[str, ...], tuple[str, ...]], ...],
) -> list[SpecialistTemplate]:
    return [
        SpecialistTemplate(
            species=species,
            label=domain,
            domain=domain,
            keywords=keywords,
            affinities=frozenset(affinities),
            emoji=emoji,
        )
        for species, emoji, domain, keywords, affinities in rows
    ]


def _plain(rows: tuple[tuple[str, str, str, tuple[str, ...]], ...]) -> list[SpecialistTemplate]:
    return _with_affinities(tuple((*row, ()) for row in rows))


def creative_templates() -> list[SpecialistTemplate]:
    return _with_affinities(CREATIVE)


def infra_templates() -> list[SpecialistTemplate]:
    return _with_affinities(INFRA)


def research_templates() -> list[SpecialistTemplate]:
    return _plain(RESEARCH)


def business_templates() -> list[SpecialistTemplate]:
    return _plain(BUSINESS)


def wellbeing_templates() -> list[SpecialistTemplate]:
    return _plain(WELLBEING)


def localized_templates() -> list[SpecialistTemplate]:
    return _plain(LOCALIZED)


def stack_templates() -> list[SpecialistTemplate]:
    """Named stack specialists across web, backend, AI, ops and tooling."""
    return [
        SpecialistTemplate(
            species=species,
            label=label,
            domain=domain,
            keywords=keywords,
            affinities=frozenset(affinities),
            emoji=emoji,
        )
        for species, label, emoji, domain, keywords, affinities in STACK
    ]


FAMILY_BUILDERS = (
    code_templates,
    stack_templates,
    creative_templates,
    infra_templates,
    research_templates,
    business_templates,
    wellbeing_templates,
    localized_templates,
)
