"""DevOps / infrastructure rule catalog — Docker, Kubernetes, Terraform, CI."""

from __future__ import annotations

from guardscan.scanner.models import PatternRule, Severity
from guardscan.scanner.rules.loader import RuleFilter, build_rule, keep_matching

CONTAINER = "Container Security"
KUBERNETES = "Kubernetes Security"
INFRASTRUCTURE = "Infrastructure Security"
DATA_PROTECTION = "Data Protection"
CICD = "CI/CD Security"

RULES: list[PatternRule] = [
    # Docker
    build_rule(
        "devops.docker-latest-tag",
        r"FROM\s+.*:latest",
        "Avoid using :latest tag in production - use specific version tags",
        Severity.MEDIUM,
        CONTAINER,
        type="Docker Tag Issue",
        cwe="CWE-1188",
    ),
    build_rule(
        "devops.docker-root-user",
        r"USER\s+root",
        "Running container as root user poses security risks",
        Severity.HIGH,
        CONTAINER,
        type="Privilege Escalation",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.docker-copy-context",
        r"COPY\s+\.\s+\.",
        "Copying entire context may include sensitive files - use .dockerignore",
        Severity.LOW,
        CONTAINER,
        type="Information Disclosure",
        cwe="CWE-200",
    ),
    build_rule(
        "devops.docker-expose-ssh",
        r"EXPOSE\s+22\b",
        "Exposing SSH port (22) in container is generally not recommended",
        Severity.MEDIUM,
        CONTAINER,
        type="Unnecessary Service Exposure",
        cwe="CWE-200",
    ),
    build_rule(
        "devops.docker-add-url",
        r"ADD\s+http",
        "Using ADD with URLs can be insecure - prefer COPY with explicit downloads",
        Severity.MEDIUM,
        CONTAINER,
        type="Insecure Download",
        cwe="CWE-494",
    ),
    # Kubernetes
    build_rule(
        "devops.k8s-privileged",
        r"privileged:\s*true",
        "Running privileged containers breaks container isolation",
        Severity.CRITICAL,
        KUBERNETES,
        type="Privilege Escalation",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.k8s-host-network",
        r"hostNetwork:\s*true",
        "Using host network bypasses network isolation",
        Severity.HIGH,
        KUBERNETES,
        type="Network Isolation Bypass",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.k8s-host-pid",
        r"hostPID:\s*true",
        "Using host PID namespace breaks process isolation",
        Severity.HIGH,
        KUBERNETES,
        type="Process Isolation Bypass",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.k8s-run-as-root",
        r"runAsUser:\s*0\b",
        "Running as root user (UID 0) in Kubernetes pod",
        Severity.HIGH,
        KUBERNETES,
        type="Root User",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.k8s-privilege-escalation",
        r"allowPrivilegeEscalation:\s*true",
        "Allowing privilege escalation can lead to container breakout",
        Severity.HIGH,
        KUBERNETES,
        type="Privilege Escalation",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.kubectl-skip-tls",
        r"kubectl\s+.*--insecure-skip-tls-verify",
        "Skipping TLS verification exposes to man-in-the-middle attacks",
        Severity.HIGH,
        KUBERNETES,
        type="TLS Bypass",
        cwe="CWE-295",
    ),
    # Terraform
    build_rule(
        "devops.tf-open-ingress",
        r"ingress\s*=\s*\[\s*\"0\.0\.0\.0/0\"\s*\]",
        "Security group allows access from anywhere (0.0.0.0/0)",
        Severity.HIGH,
        INFRASTRUCTURE,
        type="Overly Permissive Access",
        cwe="CWE-284",
    ),
    build_rule(
        "devops.tf-open-cidr",
        r"cidr_blocks\s*=\s*\[\s*\"0\.0\.0\.0/0\"\s*\]",
        "CIDR block allows access from anywhere - consider restricting",
        Severity.MEDIUM,
        INFRASTRUCTURE,
        type="Network Access Control",
        cwe="CWE-284",
    ),
    build_rule(
        "devops.tf-public-database",
        r"publicly_accessible\s*=\s*true",
        "Database is publicly accessible - ensure this is intentional",
        Severity.HIGH,
        "Database Security",
        type="Public Database Access",
        cwe="CWE-284",
    ),
    build_rule(
        "devops.tf-skip-final-snapshot",
        r"skip_final_snapshot\s*=\s*true",
        "Skipping final snapshot may lead to data loss",
        Severity.MEDIUM,
        DATA_PROTECTION,
        type="Data Loss Risk",
        cwe="CWE-404",
    ),
    build_rule(
        "devops.tf-unencrypted",
        r"encrypted\s*=\s*false",
        "Encryption disabled - data stored in plaintext",
        Severity.HIGH,
        DATA_PROTECTION,
        type="Unencrypted Data",
        cwe="CWE-311",
    ),
    # CI/CD
    build_rule(
        "devops.ci-docker-privileged",
        r"docker\s+run\s+.*--privileged",
        "Running Docker with --privileged flag in CI/CD pipeline",
        Severity.HIGH,
        CICD,
        type="Privileged Container",
        cwe="CWE-250",
    ),
    build_rule(
        "devops.ci-curl-bash",
        r"curl\s+.*\|\s*(?:sudo\s+)?bash",
        "Piping curl output to bash is dangerous - verify scripts first",
        Severity.HIGH,
        CICD,
        type="Remote Code Execution",
        cwe="CWE-494",
    ),
    build_rule(
        "devops.ci-wget-sh",
        r"wget\s+.*\|\s*(?:sudo\s+)?sh\b",
        "Piping wget output to shell is dangerous - verify scripts first",
        Severity.HIGH,
        CICD,
        type="Remote Code Execution",
        cwe="CWE-494",
    ),
    build_rule(
        "devops.ci-passwordless-sudo",
        r"sudo\s+.*without.*password|NOPASSWD",
        "Passwordless sudo in CI/CD can be exploited",
        Severity.MEDIUM,
        CICD,
        type="Privilege Escalation",
        cwe="CWE-250",
    ),
    # Infrastructure as code
    build_rule(
        "devops.default-security-group",
        r"default_security_group",
        "Using default security group - create custom security groups",
        Severity.MEDIUM,
        INFRASTRUCTURE,
        type="Default Configuration",
        cwe="CWE-284",
    ),
    build_rule(
        "devops.s3-versioning-off",
        r"versioning\s*=\s*false",
        "S3 versioning disabled - enable for data protection",
        Severity.MEDIUM,
        DATA_PROTECTION,
        type="Version Control",
        cwe="CWE-404",
    ),
    build_rule(
        "devops.s3-mfa-delete-off",
        r"mfa_delete\s*=\s*false",
        "MFA delete disabled - enable for critical S3 buckets",
        Severity.MEDIUM,
        DATA_PROTECTION,
        type="Multi-Factor Authentication",
        cwe="CWE-287",
    ),
]

BUCKETS: dict[str, str] = {
    CONTAINER: "container",
    KUBERNETES: "kubernetes",
    CICD: "cicd",
    INFRASTRUCTURE: "infrastructure",
    DATA_PROTECTION: "infrastructure",
}
DEFAULT_BUCKET = "infrastructure"

# Checked in order; the first entry whose keyword appears in the context wins
CONTEXT_FILTERS: list[tuple[tuple[str, ...], RuleFilter]] = [
    (("dockerfile",), keep_matching([CONTAINER])),
    (("kubernetes", "k8s", "yaml", "yml"), keep_matching([KUBERNETES, CONTAINER])),
    (("terraform", ".tf"), keep_matching([INFRASTRUCTURE, DATA_PROTECTION])),
    (("jenkins", "github", "gitlab", "ci"), keep_matching([CICD])),
]

# Infrastructure findings in Terraform sources are reported separately
TERRAFORM_CONTEXTS = ("terraform", "tf")
TERRAFORM_CATEGORIES = frozenset({INFRASTRUCTURE, DATA_PROTECTION})
