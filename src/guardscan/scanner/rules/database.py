"""Database rule catalog, filtered by engine (mysql, postgres, mongo, redis)."""

from __future__ import annotations

from guardscan.scanner.models import PatternRule, Severity
from guardscan.scanner.rules.loader import (
    RuleFilter,
    build_rule,
    drop_matching,
    keep_matching,
)

SQL_INJECTION = "SQL Injection"
NOSQL_INJECTION = "NoSQL Injection"
AUTHENTICATION = "Authentication"
ACCESS_CONTROL = "Access Control"
ENCRYPTION = "Encryption"
CONFIGURATION = "Configuration"
BACKUP = "Backup Security"
AUDITING = "Auditing"

_REQUEST_DATA = r"(?:req\.|request\.|input|param|user|query|body)"

RULES: list[PatternRule] = [
    # SQL injection
    build_rule(
        "database.sql-concatenation",
        rf"(?:SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER).*\+.*{_REQUEST_DATA}",
        "Critical: SQL injection vulnerability - String concatenation in SQL query",
        Severity.CRITICAL,
        SQL_INJECTION,
        type="Dynamic Query Construction",
        cwe="CWE-89",
    ),
    build_rule(
        "database.query-concatenation",
        r"query\s*\(\s*['\"`][^'\"`]*['\"`]\s*\+",
        "Critical: SQL injection - Dynamic query construction with concatenation",
        Severity.CRITICAL,
        SQL_INJECTION,
        type="Query Concatenation",
        cwe="CWE-89",
    ),
    build_rule(
        "database.execute-concatenation",
        r"execute\s*\(\s*['\"`][^'\"`]*['\"`]\s*\+",
        "Critical: SQL injection - Dynamic execute statement",
        Severity.CRITICAL,
        SQL_INJECTION,
        type="Execute Concatenation",
        cwe="CWE-89",
    ),
    build_rule(
        "database.template-literal",
        r"\$\{.*\}.*(?:SELECT|INSERT|UPDATE|DELETE)",
        "High: Potential SQL injection - Template literal in SQL query",
        Severity.HIGH,
        SQL_INJECTION,
        type="Template Injection",
        cwe="CWE-89",
    ),
    build_rule(
        "database.string-format",
        r"format\s*\(\s*['\"`].*(?:SELECT|INSERT|UPDATE|DELETE).*['\"`]",
        "High: SQL injection risk - String formatting in SQL query",
        Severity.HIGH,
        SQL_INJECTION,
        type="String Formatting",
        cwe="CWE-89",
    ),
    # Authentication and access control
    build_rule(
        "database.empty-password",
        r"password\s*=\s*['\"`]['\"`]",
        "Critical: Empty database password detected",
        Severity.CRITICAL,
        AUTHENTICATION,
        type="Empty Password",
        cwe="CWE-521",
    ),
    build_rule(
        "database.weak-password",
        r"password\s*=\s*['\"`](?:password|123456|admin|root|test)['\"`]",
        "Critical: Weak default database password detected",
        Severity.CRITICAL,
        AUTHENTICATION,
        type="Weak Password",
        cwe="CWE-521",
    ),
    build_rule(
        "database.privileged-user",
        r"user\s*=\s*['\"`](?:root|admin|sa)['\"`]",
        "High: Using privileged database user account",
        Severity.HIGH,
        ACCESS_CONTROL,
        type="Privileged Account",
        cwe="CWE-250",
    ),
    build_rule(
        "database.grant-all",
        r"GRANT\s+ALL\s+PRIVILEGES",
        "High: Granting all privileges - follow principle of least privilege",
        Severity.HIGH,
        ACCESS_CONTROL,
        type="Excessive Privileges",
        cwe="CWE-250",
    ),
    build_rule(
        "database.grant-any-host",
        r"GRANT.*TO.*@'%'",
        "High: Granting permissions to any host (%) - restrict to specific hosts",
        Severity.HIGH,
        ACCESS_CONTROL,
        type="Overly Permissive Access",
        cwe="CWE-284",
    ),
    # Connection security
    build_rule(
        "database.sslmode-disabled",
        r"sslmode\s*=\s*disable",
        "High: SSL/TLS disabled for database connection",
        Severity.HIGH,
        ENCRYPTION,
        type="Unencrypted Connection",
        cwe="CWE-319",
    ),
    build_rule(
        "database.trust-server-certificate",
        r"trust_server_certificate\s*=\s*true",
        "Medium: Database connection trusting server certificate without verification",
        Severity.MEDIUM,
        ENCRYPTION,
        type="Certificate Validation Bypass",
        cwe="CWE-295",
    ),
    build_rule(
        "database.encrypt-disabled",
        r"encrypt\s*=\s*false",
        "High: Database connection encryption disabled",
        Severity.HIGH,
        ENCRYPTION,
        type="Unencrypted Connection",
        cwe="CWE-319",
    ),
    build_rule(
        "database.url-without-ssl",
        r"(?:mongodb|mysql|postgres)://[^:\s]*:[^@\s]*@[^/\s]*/(?![^\s'\"`]*ssl)",
        "Medium: Database connection string without SSL parameters",
        Severity.MEDIUM,
        ENCRYPTION,
        type="Missing SSL Configuration",
        cwe="CWE-319",
    ),
    # Data at rest
    build_rule(
        "database.unencrypted-table",
        r"CREATE\s+TABLE(?!.*ENCRYPTED)",
        "Low: Table created without encryption - consider encrypting sensitive data",
        Severity.LOW,
        ENCRYPTION,
        type="Unencrypted Storage",
        cwe="CWE-311",
    ),
    build_rule(
        "database.sensitive-column",
        r"(?:password|ssn|credit_card|social_security).*VARCHAR(?!.*ENCRYPTED)",
        "High: Sensitive data stored without encryption",
        Severity.HIGH,
        ENCRYPTION,
        type="Sensitive Data Exposure",
        cwe="CWE-311",
    ),
    # Server configuration
    build_rule(
        "database.skip-grant-tables",
        r"skip-grant-tables",
        "Critical: MySQL running with skip-grant-tables (no authentication)",
        Severity.CRITICAL,
        CONFIGURATION,
        type="Authentication Bypass",
        cwe="CWE-287",
    ),
    build_rule(
        "database.bind-all-interfaces",
        r"bind-address\s*=\s*0\.0\.0\.0",
        "Medium: Database bound to all interfaces - restrict to specific IPs",
        Severity.MEDIUM,
        CONFIGURATION,
        type="Network Exposure",
        cwe="CWE-284",
    ),
    build_rule(
        "database.default-port",
        r"port\s*=\s*(?:3306|5432|1433|27017)\b",
        "Low: Using default database port - consider changing for security",
        Severity.LOW,
        CONFIGURATION,
        type="Default Configuration",
        cwe="CWE-1188",
    ),
    # Stored procedures
    build_rule(
        "database.definer-rights",
        r"DEFINER\s*=\s*.*@.*\s+SQL\s+SECURITY\s+DEFINER",
        "Medium: Stored procedure with DEFINER rights - review security context",
        Severity.MEDIUM,
        ACCESS_CONTROL,
        type="Privilege Context",
        cwe="CWE-250",
    ),
    build_rule(
        "database.dynamic-exec",
        r"EXEC\s*\(\s*@",
        "High: Dynamic SQL execution in stored procedure - SQL injection risk",
        Severity.HIGH,
        SQL_INJECTION,
        type="Dynamic SQL",
        cwe="CWE-89",
    ),
    # Backups
    build_rule(
        "database.mysqldump-no-master-data",
        r"mysqldump(?=.*--single-transaction)(?!.*--master-data)",
        "Low: Backup without master data - may affect point-in-time recovery",
        Severity.LOW,
        BACKUP,
        type="Incomplete Backup",
        cwe="CWE-404",
    ),
    build_rule(
        "database.pg-dump-password",
        r"pg_dump(?!.*--no-password)",
        "Medium: Database backup may prompt for password - use .pgpass or environment variables",
        Severity.MEDIUM,
        BACKUP,
        type="Password Exposure",
        cwe="CWE-522",
    ),
    # Auditing
    build_rule(
        "database.statement-logging-off",
        r"log_statement\s*=\s*none",
        "Medium: Database statement logging disabled - enable for security auditing",
        Severity.MEDIUM,
        AUDITING,
        type="Insufficient Logging",
        cwe="CWE-778",
    ),
    build_rule(
        "database.general-log-off",
        r"general_log\s*=\s*OFF",
        "Low: General query log disabled - consider enabling for auditing",
        Severity.LOW,
        AUDITING,
        type="Logging Disabled",
        cwe="CWE-778",
    ),
    # MongoDB
    build_rule(
        "database.mongo-eval",
        r"db\.eval\s*\(",
        "High: MongoDB eval() function - potential code injection",
        Severity.HIGH,
        NOSQL_INJECTION,
        type="Code Injection",
        cwe="CWE-94",
    ),
    build_rule(
        "database.mongo-where",
        r"\$where.*\+",
        "High: MongoDB $where operator with concatenation - injection risk",
        Severity.HIGH,
        NOSQL_INJECTION,
        type="Where Injection",
        cwe="CWE-94",
    ),
    build_rule(
        "database.mongo-authorization-disabled",
        r"authorization:\s*disabled",
        "Critical: MongoDB authorization disabled",
        Severity.CRITICAL,
        AUTHENTICATION,
        type="Authorization Disabled",
        cwe="CWE-287",
    ),
    # Redis
    build_rule(
        "database.redis-empty-password",
        r"requirepass\s*['\"`]['\"`]",
        "Critical: Redis password is empty",
        Severity.CRITICAL,
        AUTHENTICATION,
        type="Empty Password",
        cwe="CWE-521",
    ),
    build_rule(
        "database.redis-protected-mode-off",
        r"protected-mode\s*no",
        "High: Redis protected mode disabled",
        Severity.HIGH,
        CONFIGURATION,
        type="Protection Disabled",
        cwe="CWE-284",
    ),
]

BUCKETS: dict[str, str] = {
    SQL_INJECTION: "sql_injection",
    NOSQL_INJECTION: "sql_injection",
    CONFIGURATION: "configuration",
    BACKUP: "configuration",
    ACCESS_CONTROL: "access_control",
    AUTHENTICATION: "access_control",
    ENCRYPTION: "encryption",
    AUDITING: "auditing",
}
DEFAULT_BUCKET = "configuration"

CONTEXT_FILTERS: list[tuple[tuple[str, ...], RuleFilter]] = [
    (
        ("mysql", "mariadb"),
        drop_matching(["NoSQL"], ["PostgreSQL", "MongoDB", "Redis"]),
    ),
    (
        ("postgres",),
        drop_matching(["NoSQL"], ["MySQL", "MongoDB", "Redis"]),
    ),
    (
        ("mongo",),
        keep_matching(
            ["NoSQL", AUTHENTICATION, ENCRYPTION, ACCESS_CONTROL], ["MongoDB"]
        ),
    ),
    (("redis",), keep_matching([AUTHENTICATION, CONFIGURATION], ["Redis"])),
]
