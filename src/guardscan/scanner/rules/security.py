"""Security rule catalog — injection, XSS, insecure transport and friends."""

from __future__ import annotations

from guardscan.scanner.models import PatternRule, Severity
from guardscan.scanner.rules.loader import build_rule

_USER_INPUT = r"(?:req\.|input|param|user)"

RULES: list[PatternRule] = [
    # Code injection
    build_rule(
        "security.eval",
        r"\beval\s*\(",
        "Critical: Code injection vulnerability - Use of eval()",
        Severity.CRITICAL,
        "Code Injection",
        cwe="CWE-94",
    ),
    build_rule(
        "security.function-constructor",
        r"new\s+Function\s*\(",
        "Critical: Code injection risk - Use of Function constructor",
        Severity.CRITICAL,
        "Code Injection",
        cwe="CWE-94",
    ),
    build_rule(
        "security.set-timeout-string",
        r"setTimeout\s*\(\s*['\"`][^'\"`]*['\"`]",
        "High: Code injection risk - setTimeout with string argument",
        Severity.HIGH,
        "Code Injection",
        cwe="CWE-94",
    ),
    build_rule(
        "security.set-interval-string",
        r"setInterval\s*\(\s*['\"`][^'\"`]*['\"`]",
        "High: Code injection risk - setInterval with string argument",
        Severity.HIGH,
        "Code Injection",
        cwe="CWE-94",
    ),
    # Cross-site scripting
    build_rule(
        "security.inner-html-user-data",
        r"innerHTML\s*=.*(?:user|input|param|req\.|query|body)",
        "Critical: XSS vulnerability - innerHTML assignment with user data",
        Severity.CRITICAL,
        "Cross-Site Scripting",
        cwe="CWE-79",
    ),
    build_rule(
        "security.document-write",
        r"document\.write\s*\(",
        "High: XSS vulnerability - Use of document.write()",
        Severity.HIGH,
        "Cross-Site Scripting",
        cwe="CWE-79",
    ),
    build_rule(
        "security.html-manipulation",
        r"\.innerHTML\s*\+=|\.outerHTML\s*=",
        "Medium: Potential XSS - Direct HTML manipulation",
        Severity.MEDIUM,
        "Cross-Site Scripting",
        cwe="CWE-79",
    ),
    build_rule(
        "security.dangerously-set-inner-html",
        r"dangerouslySetInnerHTML",
        "High: XSS risk - dangerouslySetInnerHTML without sanitization",
        Severity.HIGH,
        "Cross-Site Scripting",
        cwe="CWE-79",
    ),
    # SQL injection
    build_rule(
        "security.sql-concatenation",
        rf"(?:SELECT|INSERT|UPDATE|DELETE).*\+.*{_USER_INPUT}",
        "Critical: SQL injection vulnerability - String concatenation in SQL query",
        Severity.CRITICAL,
        "SQL Injection",
        cwe="CWE-89",
    ),
    build_rule(
        "security.dynamic-query",
        r"query\s*\(\s*['\"`][^'\"`]*['\"`]\s*\+",
        "Critical: SQL injection - Dynamic query construction",
        Severity.CRITICAL,
        "SQL Injection",
        cwe="CWE-89",
    ),
    build_rule(
        "security.dynamic-execute",
        r"execute\s*\(\s*['\"`][^'\"`]*['\"`]\s*\+",
        "Critical: SQL injection - Dynamic execute statement",
        Severity.CRITICAL,
        "SQL Injection",
        cwe="CWE-89",
    ),
    # Information disclosure and storage
    build_rule(
        "security.sensitive-console-log",
        r"(?:password|secret|key|token).*console\.log",
        "Critical: Information disclosure - Sensitive data logged to console",
        Severity.CRITICAL,
        "Information Disclosure",
        cwe="CWE-532",
    ),
    build_rule(
        "security.local-storage-secret",
        r"localStorage\.setItem.*(?:password|token|secret|jwt)",
        "High: Sensitive data stored in localStorage (accessible via XSS)",
        Severity.HIGH,
        "Insecure Storage",
        cwe="CWE-922",
    ),
    build_rule(
        "security.session-storage-secret",
        r"sessionStorage\.setItem.*(?:password|token|secret|jwt)",
        "High: Sensitive data stored in sessionStorage",
        Severity.HIGH,
        "Insecure Storage",
        cwe="CWE-922",
    ),
    build_rule(
        "security.weak-random",
        r"Math\.random\(\).*(?:password|token|id|key|session)",
        "Critical: Cryptographically weak random number generation",
        Severity.CRITICAL,
        "Weak Cryptography",
        cwe="CWE-338",
    ),
    # Transport
    build_rule(
        "security.plain-http",
        r"http://(?!localhost|127\.0\.0\.1|0\.0\.0\.0)",
        "Medium: Insecure protocol - Use HTTPS instead of HTTP",
        Severity.MEDIUM,
        "Insecure Communication",
        cwe="CWE-319",
    ),
    build_rule(
        "security.fetch-http",
        r"fetch\s*\(\s*['\"`]http://",
        "Medium: Insecure HTTP request - Use HTTPS",
        Severity.MEDIUM,
        "Insecure Communication",
        cwe="CWE-319",
    ),
    build_rule(
        "security.xhr-http",
        r"XMLHttpRequest.*open\s*\(\s*['\"`]GET['\"`]\s*,\s*['\"`]http:",
        "Medium: Insecure AJAX request over HTTP",
        Severity.MEDIUM,
        "Insecure Communication",
        cwe="CWE-319",
    ),
    # Path traversal
    build_rule(
        "security.read-file-user-path",
        rf"readFile\s*\(.*{_USER_INPUT}",
        "High: Path traversal vulnerability - User input in file path",
        Severity.HIGH,
        "Path Traversal",
        cwe="CWE-22",
    ),
    build_rule(
        "security.write-file-user-path",
        rf"writeFile\s*\(.*{_USER_INPUT}",
        "High: Path traversal vulnerability - User input in file write",
        Severity.HIGH,
        "Path Traversal",
        cwe="CWE-22",
    ),
    build_rule(
        "security.traversal-sequence",
        r"\.\./|\.\.\\|%2e%2e%2f|%2e%2e%5c",
        "Medium: Potential path traversal sequence detected",
        Severity.MEDIUM,
        "Path Traversal",
        cwe="CWE-22",
    ),
    # Command injection
    build_rule(
        "security.exec-user-input",
        rf"\bexec\s*\(.*{_USER_INPUT}",
        "Critical: Command injection vulnerability - User input in exec()",
        Severity.CRITICAL,
        "Command Injection",
        cwe="CWE-78",
    ),
    build_rule(
        "security.spawn-user-input",
        rf"\bspawn\s*\(.*{_USER_INPUT}",
        "Critical: Command injection vulnerability - User input in spawn()",
        Severity.CRITICAL,
        "Command Injection",
        cwe="CWE-78",
    ),
    build_rule(
        "security.system-user-input",
        rf"\bsystem\s*\(.*{_USER_INPUT}",
        "Critical: Command injection vulnerability - User input in system()",
        Severity.CRITICAL,
        "Command Injection",
        cwe="CWE-78",
    ),
    build_rule(
        "security.subprocess-shell",
        r"subprocess\.\w+\s*\(.*shell\s*=\s*True",
        "High: Command injection risk - subprocess call with shell=True",
        Severity.HIGH,
        "Command Injection",
        cwe="CWE-78",
        flags=0,
    ),
    build_rule(
        "security.pickle-loads",
        r"\bpickle\.loads?\s*\(",
        "High: Insecure deserialization - pickle can execute arbitrary code",
        Severity.HIGH,
        "Insecure Deserialization",
        cwe="CWE-502",
        flags=0,
    ),
    # DevOps
    build_rule(
        "security.docker-latest",
        r"FROM\s+.*:latest",
        "Medium: Docker security - Avoid using :latest tag in production",
        Severity.MEDIUM,
        "DevOps Security",
        cwe="CWE-1188",
    ),
    build_rule(
        "security.docker-root",
        r"USER\s+root",
        "High: Docker security - Running as root user",
        Severity.HIGH,
        "DevOps Security",
        cwe="CWE-250",
    ),
    build_rule(
        "security.docker-copy-context",
        r"COPY\s+\.\s+\.",
        "Low: Docker security - Copying entire context (consider .dockerignore)",
        Severity.LOW,
        "DevOps Security",
        cwe="CWE-200",
    ),
    build_rule(
        "security.kubectl-insecure",
        r"kubectl\s+.*--insecure-skip-tls-verify",
        "High: Kubernetes security - Skipping TLS verification",
        Severity.HIGH,
        "DevOps Security",
        cwe="CWE-295",
    ),
    # API
    build_rule(
        "security.cors-wildcard",
        r"cors\s*\(\s*\{\s*origin\s*:\s*['\"`]\*['\"`]",
        "High: CORS misconfiguration - Allowing all origins (*)",
        Severity.HIGH,
        "API Security",
        cwe="CWE-346",
    ),
    build_rule(
        "security.cors-unrestricted",
        r"app\.use\s*\(\s*cors\s*\(\s*\)\s*\)",
        "Medium: CORS enabled without restrictions",
        Severity.MEDIUM,
        "API Security",
        cwe="CWE-346",
    ),
    build_rule(
        "security.static-dotfiles",
        r"express\.static\s*\((?![^)]*dotfiles)[^)]*\)",
        "Medium: Static file serving without dotfiles protection",
        Severity.MEDIUM,
        "API Security",
        cwe="CWE-200",
    ),
    # Cryptography
    build_rule(
        "security.weak-hash",
        r"\b(?:md5|sha1)\b(?!.*hmac)",
        "Medium: Weak cryptographic hash function (MD5/SHA1)",
        Severity.MEDIUM,
        "Weak Cryptography",
        cwe="CWE-327",
    ),
    build_rule(
        "security.weak-cipher",
        r"\b(?:3?DES|RC4)\b",
        "High: Weak encryption algorithm detected",
        Severity.HIGH,
        "Weak Cryptography",
        cwe="CWE-327",
        flags=0,
    ),
    # UI
    build_rule(
        "security.dialogs",
        r"\b(?:prompt|confirm|alert)\s*\(",
        "Low: User interaction dialogs may be used for social engineering",
        Severity.LOW,
        "Social Engineering",
        cwe="CWE-1021",
    ),
    build_rule(
        "security.window-open",
        r"window\.open\s*\(",
        "Low: Popup windows may be blocked or used maliciously",
        Severity.LOW,
        "UI Security",
        cwe="CWE-1021",
    ),
    # Database
    build_rule(
        "security.empty-password",
        r"password\s*=\s*['\"`]['\"`]",
        "High: Empty database password detected",
        Severity.HIGH,
        "Database Security",
        cwe="CWE-521",
    ),
    build_rule(
        "security.trust-server-certificate",
        r"trust_server_certificate\s*=\s*true",
        "Medium: Database connection trusting server certificate",
        Severity.MEDIUM,
        "Database Security",
        cwe="CWE-295",
    ),
]

# Every security finding lands in one list
BUCKETS: dict[str, str] = {}
DEFAULT_BUCKET = "vulnerabilities"
