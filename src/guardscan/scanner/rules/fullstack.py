"""Full-stack web rule catalog, filtered by framework."""

from __future__ import annotations

from guardscan.scanner.models import PatternRule, Severity
from guardscan.scanner.rules.loader import RuleFilter, build_rule, keep_matching

FRONTEND = "Frontend Security"
FRAMEWORK = "Frontend Framework"
WEBSOCKET = "WebSocket Security"
BACKEND = "Backend Security"
ERROR_HANDLING = "Error Handling"
API = "API Security"
GRAPHQL = "GraphQL Security"
AUTHENTICATION = "Authentication"
DATA_VALIDATION = "Data Validation"
FILE_UPLOAD = "File Upload"
SESSION = "Session Management"

RULES: list[PatternRule] = [
    # Browser side
    build_rule(
        "fullstack.dangerously-set-inner-html",
        r"dangerouslySetInnerHTML.*\{.*__html:",
        "Critical: XSS vulnerability - dangerouslySetInnerHTML without sanitization",
        Severity.CRITICAL,
        FRONTEND,
        type="Cross-Site Scripting",
        cwe="CWE-79",
    ),
    build_rule(
        "fullstack.inner-html-dynamic",
        r"innerHTML\s*=.*(?:props\.|state\.|user|input)",
        "High: XSS risk - innerHTML with dynamic content",
        Severity.HIGH,
        FRONTEND,
        type="DOM Manipulation",
        cwe="CWE-79",
    ),
    build_rule(
        "fullstack.cookie-user-input",
        r"document\.cookie\s*=.*(?:user|input|param)",
        "High: Cookie manipulation with user input",
        Severity.HIGH,
        FRONTEND,
        type="Cookie Injection",
        cwe="CWE-79",
    ),
    build_rule(
        "fullstack.local-storage-secret",
        r"localStorage\.setItem.*(?:token|password|secret|key)",
        "High: Sensitive data stored in localStorage (accessible via XSS)",
        Severity.HIGH,
        FRONTEND,
        type="Insecure Storage",
        cwe="CWE-922",
    ),
    build_rule(
        "fullstack.post-message-wildcard",
        r"window\.postMessage\s*\(\s*.*,\s*['\"`]\*['\"`]",
        "High: postMessage with wildcard origin (*)",
        Severity.HIGH,
        FRONTEND,
        type="Origin Validation",
        cwe="CWE-346",
    ),
    build_rule(
        "fullstack.fetch-dynamic-url",
        r"fetch\s*\(\s*.*\+.*(?:user|input|param)",
        "Medium: Dynamic URL construction in fetch request",
        Severity.MEDIUM,
        FRONTEND,
        type="URL Manipulation",
        cwe="CWE-918",
    ),
    # Server side
    build_rule(
        "fullstack.cors-unrestricted",
        r"app\.use\s*\(\s*cors\s*\(\s*\)\s*\)",
        "Medium: CORS enabled without restrictions",
        Severity.MEDIUM,
        BACKEND,
        type="CORS Misconfiguration",
        cwe="CWE-346",
    ),
    build_rule(
        "fullstack.cors-wildcard",
        r"cors\s*\(\s*\{\s*origin\s*:\s*['\"`]\*['\"`]",
        "High: CORS allowing all origins (*)",
        Severity.HIGH,
        BACKEND,
        type="CORS Wildcard",
        cwe="CWE-346",
    ),
    build_rule(
        "fullstack.static-serving",
        r"app\.use\s*\(\s*express\.static\s*\(.*\)\s*\)",
        "Medium: Static file serving without restrictions",
        Severity.MEDIUM,
        BACKEND,
        type="File Exposure",
        cwe="CWE-200",
    ),
    build_rule(
        "fullstack.debug-logging",
        r"process\.env\.NODE_ENV\s*!==\s*['\"`]production['\"`].*console\.log",
        "Low: Debug logging may leak sensitive information",
        Severity.LOW,
        BACKEND,
        type="Information Disclosure",
        cwe="CWE-532",
    ),
    # API
    build_rule(
        "fullstack.route-without-auth",
        r"app\.(?:get|post|put|delete)\s*\(\s*['\"`][^'\"`]*['\"`]\s*,(?!.*(?:auth|middleware))",
        "Medium: API endpoint without authentication middleware",
        Severity.MEDIUM,
        API,
        type="Missing Authentication",
        cwe="CWE-306",
    ),
    build_rule(
        "fullstack.password-in-response",
        r"res\.json\s*\(\s*.*password.*\)",
        "High: Password field in API response",
        Severity.HIGH,
        API,
        type="Sensitive Data Exposure",
        cwe="CWE-200",
    ),
    build_rule(
        "fullstack.api-without-rate-limit",
        r"app\.use\s*\(\s*['\"`]/api['\"`](?!.*rate.*limit)",
        "Medium: API without rate limiting",
        Severity.MEDIUM,
        API,
        type="Missing Rate Limiting",
        cwe="CWE-770",
    ),
    build_rule(
        "fullstack.query-command-injection",
        r"req\.query\.\w+.*(?:exec|eval|system)",
        "Critical: Command injection via query parameters",
        Severity.CRITICAL,
        API,
        type="Command Injection",
        cwe="CWE-78",
    ),
    # Authentication
    build_rule(
        "fullstack.jwt-empty-secret",
        r"jwt\.sign\s*\(\s*.*,\s*['\"`]['\"`]",
        "Critical: JWT signed with empty secret",
        Severity.CRITICAL,
        AUTHENTICATION,
        type="Weak JWT Secret",
        cwe="CWE-327",
    ),
    build_rule(
        "fullstack.jwt-weak-secret",
        r"jwt\.sign\s*\(\s*.*,\s*['\"`]secret['\"`]",
        "High: JWT signed with weak secret",
        Severity.HIGH,
        AUTHENTICATION,
        type="Weak JWT Secret",
        cwe="CWE-327",
    ),
    build_rule(
        "fullstack.bcrypt-unawaited",
        r"(?<!await )bcrypt\.compare\s*\([^)]*\)(?!\s*\.(?:then|catch))",
        "Medium: bcrypt.compare without proper async handling",
        Severity.MEDIUM,
        AUTHENTICATION,
        type="Authentication Logic",
        cwe="CWE-287",
    ),
    build_rule(
        "fullstack.passport-no-session",
        r"passport\.authenticate\s*\(\s*['\"`]local['\"`]\s*,\s*\{\s*session\s*:\s*false",
        "Low: Passport authentication without session",
        Severity.LOW,
        AUTHENTICATION,
        type="Session Management",
        cwe="CWE-287",
    ),
    # Sessions and cookies
    build_rule(
        "fullstack.weak-session-secret",
        r"session\s*\(\s*\{\s*secret\s*:\s*['\"`](?:secret|default|key)['\"`]",
        "High: Weak session secret",
        Severity.HIGH,
        SESSION,
        type="Weak Session Secret",
        cwe="CWE-327",
    ),
    build_rule(
        "fullstack.session-insecure-cookie",
        r"session\s*\(\s*\{[^}]*secure\s*:\s*false",
        "Medium: Session cookies not marked as secure",
        Severity.MEDIUM,
        SESSION,
        type="Insecure Cookie",
        cwe="CWE-614",
    ),
    build_rule(
        "fullstack.session-script-cookie",
        r"session\s*\(\s*\{[^}]*httpOnly\s*:\s*false",
        "Medium: Session cookies accessible via JavaScript",
        Severity.MEDIUM,
        SESSION,
        type="Cookie Accessibility",
        cwe="CWE-1004",
    ),
    build_rule(
        "fullstack.cookie-insecure",
        r"res\.cookie\s*\(\s*.*,\s*.*,\s*\{[^}]*secure\s*:\s*false",
        "Medium: Cookie not marked as secure",
        Severity.MEDIUM,
        SESSION,
        type="Insecure Cookie",
        cwe="CWE-614",
    ),
    # Input validation
    build_rule(
        "fullstack.unvalidated-body",
        r"req\.body\.\w+(?!.*(?:validate|sanitize|escape))",
        "Medium: Request body used without validation",
        Severity.MEDIUM,
        DATA_VALIDATION,
        type="Input Validation",
        cwe="CWE-20",
    ),
    build_rule(
        "fullstack.params-dangerous-use",
        r"req\.params\.\w+.*(?:query|exec|system)",
        "High: URL parameters used in dangerous operations",
        Severity.HIGH,
        DATA_VALIDATION,
        type="Parameter Injection",
        cwe="CWE-20",
    ),
    build_rule(
        "fullstack.parse-int-request",
        r"parseInt\s*\(\s*req\.[\w.]+\s*\)",
        "Low: parseInt without radix parameter",
        Severity.LOW,
        DATA_VALIDATION,
        type="Number Parsing",
        cwe="CWE-20",
    ),
    build_rule(
        "fullstack.json-parse-request",
        r"JSON\.parse\s*\(\s*req\.",
        "Medium: JSON.parse without try-catch",
        Severity.MEDIUM,
        DATA_VALIDATION,
        type="JSON Parsing",
        cwe="CWE-20",
    ),
    # Uploads
    build_rule(
        "fullstack.upload-without-filter",
        r"multer\s*\(\s*\{(?![^}]*fileFilter)",
        "Medium: File upload without file type validation",
        Severity.MEDIUM,
        FILE_UPLOAD,
        type="Unrestricted File Upload",
        cwe="CWE-434",
    ),
    build_rule(
        "fullstack.upload-path",
        r"req\.file\.path(?!.*(?:sanitize|validate))",
        "High: File path used without validation",
        Severity.HIGH,
        FILE_UPLOAD,
        type="Path Traversal",
        cwe="CWE-22",
    ),
    # Errors
    build_rule(
        "fullstack.error-in-response",
        r"catch\s*\(\s*\w+\s*\)\s*\{[^}]*res\.(?:send|json)\s*\(\s*\w+",
        "Medium: Error details exposed in response",
        Severity.MEDIUM,
        ERROR_HANDLING,
        type="Information Disclosure",
        cwe="CWE-209",
    ),
    build_rule(
        "fullstack.uncaught-exception-handler",
        r"process\.on\s*\(\s*['\"`]uncaughtException['\"`]",
        "Low: Uncaught exception handler - may mask security issues",
        Severity.LOW,
        ERROR_HANDLING,
        type="Exception Handling",
        cwe="CWE-248",
    ),
    # Framework templates
    build_rule(
        "fullstack.vue-v-html",
        r"v-html\s*=\s*['\"`]\{\{.*\}\}['\"`]",
        "High: Vue.js v-html with interpolation - XSS risk",
        Severity.HIGH,
        FRAMEWORK,
        type="Template Injection",
        cwe="CWE-79",
    ),
    build_rule(
        "fullstack.angular-inner-html",
        r"\[innerHTML\]\s*=\s*['\"`].*\{\{.*\}\}.*['\"`]",
        "High: Angular innerHTML binding with interpolation",
        Severity.HIGH,
        FRAMEWORK,
        type="Template Injection",
        cwe="CWE-79",
    ),
    build_rule(
        "fullstack.react-effect-fetch",
        r"useEffect\s*\(\s*\(\s*\)\s*=>\s*\{[^}]*fetch\s*\(",
        "Low: React useEffect with fetch - ensure proper cleanup",
        Severity.LOW,
        FRAMEWORK,
        type="Resource Management",
        cwe="CWE-404",
    ),
    # WebSockets
    build_rule(
        "fullstack.websocket-plaintext",
        r"new\s+WebSocket\s*\(\s*['\"`]ws:",
        "Medium: Insecure WebSocket connection (ws:// instead of wss://)",
        Severity.MEDIUM,
        WEBSOCKET,
        type="Unencrypted Connection",
        cwe="CWE-319",
    ),
    build_rule(
        "fullstack.websocket-unvalidated",
        r"ws\.on\s*\(\s*['\"`]message['\"`](?!.*(?:validate|sanitize))",
        "Medium: WebSocket message handler without validation",
        Severity.MEDIUM,
        WEBSOCKET,
        type="Input Validation",
        cwe="CWE-20",
    ),
    # GraphQL
    build_rule(
        "fullstack.graphql-introspection",
        r"graphql\s*\(\s*\{[^}]*introspection\s*:\s*true",
        "Medium: GraphQL introspection enabled in production",
        Severity.MEDIUM,
        GRAPHQL,
        type="Information Disclosure",
        cwe="CWE-200",
    ),
    build_rule(
        "fullstack.graphql-no-depth-limit",
        r"graphql\s*\(\s*\{(?![^}]*depth\w*limit)",
        "Medium: GraphQL without query depth limiting",
        Severity.MEDIUM,
        GRAPHQL,
        type="Resource Exhaustion",
        cwe="CWE-770",
    ),
]

BUCKETS: dict[str, str] = {
    FRONTEND: "frontend",
    FRAMEWORK: "frontend",
    WEBSOCKET: "frontend",
    BACKEND: "backend",
    ERROR_HANDLING: "backend",
    API: "api",
    GRAPHQL: "api",
    AUTHENTICATION: "authentication",
    DATA_VALIDATION: "data_validation",
    FILE_UPLOAD: "data_validation",
    SESSION: "session_management",
}
DEFAULT_BUCKET = "backend"

CONTEXT_FILTERS: list[tuple[tuple[str, ...], RuleFilter]] = [
    (
        ("react", "jsx", "tsx"),
        keep_matching(
            ["Frontend", "API", AUTHENTICATION], ["React", "dangerouslySetInnerHTML"]
        ),
    ),
    (("vue",), keep_matching(["Frontend", "API"], ["Vue", "v-html"])),
    (("angular",), keep_matching(["Frontend", "API"], ["Angular", "innerHTML"])),
    (
        ("express", "node", "backend"),
        keep_matching(["Backend", "API", AUTHENTICATION, "Session", DATA_VALIDATION]),
    ),
]
