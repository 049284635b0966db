"""Secret rule catalog — credentials, tokens, keys and sensitive data.

Each rule carries a confidence; its severity tier is derived from it.
"""

from __future__ import annotations

import re

from guardscan.scanner.models import PatternRule
from guardscan.scanner.rules.loader import build_rule
from guardscan.scanner.severity import confidence_tier

# Prefix for "name: 'value'" style assignments in code and config files
_ASSIGN = r"[':\"\s]*['\"]"


def _secret(
    rule_id: str,
    name: str,
    pattern: str,
    confidence: float,
    category: str,
    flags: int = 0,
) -> PatternRule:
    return build_rule(
        f"secrets.{rule_id}",
        pattern,
        name,
        confidence_tier(confidence),
        category,
        type=name,
        confidence=confidence,
        flags=flags,
    )


RULES: list[PatternRule] = [
    # Cloud providers
    _secret(
        "aws-access-key-id",
        "AWS Access Key ID",
        r"AKIA[0-9A-Z]{16}",
        0.98,
        "Cloud Credentials",
    ),
    _secret(
        "aws-secret-access-key",
        "AWS Secret Access Key",
        rf"aws_secret_access_key{_ASSIGN}[A-Za-z0-9/+=]{{40}}['\"]",
        0.95,
        "Cloud Credentials",
        re.IGNORECASE,
    ),
    _secret(
        "aws-session-token",
        "AWS Session Token",
        rf"aws_session_token{_ASSIGN}[A-Za-z0-9/+=]{{100,}}['\"]",
        0.95,
        "Cloud Credentials",
        re.IGNORECASE,
    ),
    _secret(
        "azure-storage-key",
        "Azure Storage Account Key",
        r"(?:DefaultEndpointsProtocol=https;AccountName=|AZURE_STORAGE_ACCOUNT)"
        rf"{_ASSIGN}[A-Za-z0-9+/=]{{88}}['\"]",
        0.95,
        "Cloud Credentials",
        re.IGNORECASE,
    ),
    _secret(
        "gcp-service-account",
        "Google Cloud Service Account",
        r"\{[^}]*\"type\":\s*\"service_account\"[^}]*\}",
        0.9,
        "Cloud Credentials",
        re.IGNORECASE,
    ),
    _secret(
        "google-api-key",
        "Google API Key",
        r"AIza[0-9A-Za-z_-]{35}",
        0.95,
        "Cloud Credentials",
    ),
    # Version control and CI/CD
    _secret(
        "github-pat",
        "GitHub Personal Access Token",
        r"ghp_[a-zA-Z0-9]{36}",
        0.98,
        "Version Control",
    ),
    _secret(
        "github-oauth",
        "GitHub OAuth Token",
        r"gho_[a-zA-Z0-9]{36}",
        0.98,
        "Version Control",
    ),
    _secret(
        "gitlab-pat",
        "GitLab Personal Access Token",
        r"glpat-[a-zA-Z0-9_-]{20}",
        0.98,
        "Version Control",
    ),
    _secret(
        "bitbucket-app-password",
        "Bitbucket App Password",
        rf"bitbucket{_ASSIGN}[A-Za-z0-9]{{16}}['\"]",
        0.85,
        "Version Control",
        re.IGNORECASE,
    ),
    _secret(
        "jenkins-token",
        "Jenkins API Token",
        rf"jenkins{_ASSIGN}[a-f0-9]{{32}}['\"]",
        0.85,
        "CI/CD",
        re.IGNORECASE,
    ),
    _secret(
        "circleci-token",
        "CircleCI Token",
        rf"circle[_-]?ci{_ASSIGN}[a-f0-9]{{40}}['\"]",
        0.9,
        "CI/CD",
        re.IGNORECASE,
    ),
    _secret(
        "travis-token",
        "Travis CI Token",
        rf"travis{_ASSIGN}[A-Za-z0-9_-]{{22}}['\"]",
        0.85,
        "CI/CD",
        re.IGNORECASE,
    ),
    # Database credentials
    _secret(
        "mongodb-uri",
        "MongoDB Connection String",
        r"mongodb(?:\+srv)?://[^:\s'\"]+:[^@\s'\"]+@[^\s'\"]+",
        0.95,
        "Database",
    ),
    _secret(
        "mysql-uri",
        "MySQL Connection String",
        r"mysql://[^:\s'\"]+:[^@\s'\"]+@[^\s'\"]+",
        0.95,
        "Database",
    ),
    _secret(
        "postgres-uri",
        "PostgreSQL Connection String",
        r"postgres(?:ql)?://[^:\s'\"]+:[^@\s'\"]+@[^\s'\"]+",
        0.95,
        "Database",
    ),
    _secret(
        "redis-uri",
        "Redis Connection String",
        r"redis://[^:\s'\"]*:[^@\s'\"]+@[^\s'\"]+",
        0.9,
        "Database",
    ),
    _secret(
        "database-password",
        "Database Password (Generic)",
        rf"(?:db|database)[_-]?password{_ASSIGN}[^'\"]{{8,}}['\"]",
        0.85,
        "Database",
        re.IGNORECASE,
    ),
    _secret(
        "sqlserver-connection",
        "SQL Server Connection String",
        r"(?:server|data source)[^;]*;.*password[^;]*;",
        0.85,
        "Database",
        re.IGNORECASE,
    ),
    # API keys and tokens
    _secret(
        "slack-bot-token",
        "Slack Bot Token",
        r"xoxb-[0-9]{12}-[0-9]{12}-[a-zA-Z0-9]{24}",
        0.98,
        "API Keys",
    ),
    _secret(
        "slack-user-token",
        "Slack User Token",
        r"xoxp-[0-9]{12}-[0-9]{12}-[a-zA-Z0-9]{24}",
        0.98,
        "API Keys",
    ),
    _secret(
        "discord-bot-token",
        "Discord Bot Token",
        r"[MN][A-Za-z\d]{23}\.[\w-]{6}\.[\w-]{27}",
        0.95,
        "API Keys",
    ),
    _secret(
        "stripe-key",
        "Stripe API Key",
        r"sk_(?:live|test)_[a-zA-Z0-9]{24}",
        0.98,
        "API Keys",
    ),
    _secret(
        "paypal-client-id",
        "PayPal Client ID",
        rf"paypal{_ASSIGN}[A-Za-z0-9_-]{{80}}['\"]",
        0.85,
        "API Keys",
        re.IGNORECASE,
    ),
    _secret(
        "twilio-auth-token",
        "Twilio Auth Token",
        rf"twilio{_ASSIGN}[a-f0-9]{{32}}['\"]",
        0.9,
        "API Keys",
        re.IGNORECASE,
    ),
    _secret(
        "sendgrid-key",
        "SendGrid API Key",
        r"SG\.[a-zA-Z0-9_-]{22}\.[a-zA-Z0-9_-]{43}",
        0.98,
        "API Keys",
    ),
    _secret(
        "mailgun-key",
        "Mailgun API Key",
        r"key-[a-f0-9]{32}",
        0.9,
        "API Keys",
    ),
    # DevOps
    _secret(
        "dockerhub-token",
        "Docker Hub Token",
        rf"docker[_-]?hub{_ASSIGN}[a-f0-9-]{{36}}['\"]",
        0.85,
        "DevOps",
        re.IGNORECASE,
    ),
    _secret(
        "kubernetes-sa-token",
        "Kubernetes Service Account Token",
        r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*",
        0.8,
        "DevOps",
    ),
    _secret(
        "terraform-cloud-token",
        "Terraform Cloud Token",
        rf"terraform{_ASSIGN}[A-Za-z0-9.]{{14}}['\"]",
        0.85,
        "DevOps",
        re.IGNORECASE,
    ),
    _secret(
        "ansible-vault",
        "Ansible Vault Password",
        r"\$ANSIBLE_VAULT;[0-9.]+;AES256",
        0.98,
        "DevOps",
    ),
    # Private keys
    _secret(
        "rsa-private-key",
        "RSA Private Key",
        r"-----BEGIN\s+RSA\s+PRIVATE\s+KEY-----[\s\S]*?-----END\s+RSA\s+PRIVATE\s+KEY-----",
        1.0,
        "Cryptographic Keys",
    ),
    _secret(
        "ec-private-key",
        "EC Private Key",
        r"-----BEGIN\s+EC\s+PRIVATE\s+KEY-----[\s\S]*?-----END\s+EC\s+PRIVATE\s+KEY-----",
        1.0,
        "Cryptographic Keys",
    ),
    _secret(
        "openssh-private-key",
        "OpenSSH Private Key",
        r"-----BEGIN\s+OPENSSH\s+PRIVATE\s+KEY-----[\s\S]*?"
        r"-----END\s+OPENSSH\s+PRIVATE\s+KEY-----",
        1.0,
        "Cryptographic Keys",
    ),
    _secret(
        "pgp-private-key",
        "PGP Private Key",
        r"-----BEGIN\s+PGP\s+PRIVATE\s+KEY\s+BLOCK-----[\s\S]*?"
        r"-----END\s+PGP\s+PRIVATE\s+KEY\s+BLOCK-----",
        1.0,
        "Cryptographic Keys",
    ),
    _secret(
        "pkcs8-private-key",
        "Certificate Private Key",
        r"-----BEGIN\s+PRIVATE\s+KEY-----[\s\S]*?-----END\s+PRIVATE\s+KEY-----",
        1.0,
        "Cryptographic Keys",
    ),
    # Authentication and session tokens
    _secret(
        "jwt",
        "JWT Token",
        r"eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*",
        0.9,
        "Authentication",
    ),
    _secret(
        "bearer-token",
        "Bearer Token",
        r"[Bb]earer\s+[A-Za-z0-9_-]{20,}",
        0.8,
        "Authentication",
    ),
    _secret(
        "session-token",
        "Session Token",
        rf"session[_-]?token{_ASSIGN}[A-Za-z0-9+/=]{{32,}}['\"]",
        0.8,
        "Authentication",
        re.IGNORECASE,
    ),
    _secret(
        "auth-token",
        "Auth Token (Generic)",
        rf"auth[_-]?token{_ASSIGN}[A-Za-z0-9+/=]{{20,}}['\"]",
        0.75,
        "Authentication",
        re.IGNORECASE,
    ),
    # Generic, lower confidence
    _secret(
        "api-key",
        "API Key (Generic)",
        rf"api[_-]?key{_ASSIGN}[a-zA-Z0-9]{{16,}}['\"]",
        0.7,
        "API Keys",
        re.IGNORECASE,
    ),
    _secret(
        "password",
        "Password (Hardcoded)",
        rf"(?:password|passwd|pwd){_ASSIGN}[^'\"]{{8,}}['\"]",
        0.6,
        "Credentials",
        re.IGNORECASE,
    ),
    _secret(
        "secret-key",
        "Secret Key (Generic)",
        rf"secret[_-]?key{_ASSIGN}[a-zA-Z0-9]{{16,}}['\"]",
        0.7,
        "Credentials",
        re.IGNORECASE,
    ),
    _secret(
        "access-token",
        "Access Token (Generic)",
        rf"access[_-]?token{_ASSIGN}[A-Za-z0-9+/=]{{20,}}['\"]",
        0.7,
        "Authentication",
        re.IGNORECASE,
    ),
    # Credentials embedded in URLs
    _secret(
        "ftp-credentials",
        "FTP Credentials",
        r"ftp://[^:\s'\"]+:[^@\s'\"]+@[^\s'\"]+",
        0.95,
        "Network",
    ),
    _secret(
        "smtp-credentials",
        "SMTP Credentials",
        r"smtp://[^:\s'\"]+:[^@\s'\"]+@[^\s'\"]+",
        0.9,
        "Network",
    ),
    _secret(
        "ssh-connection",
        "SSH Connection String",
        r"ssh://[^:\s'\"]+:[^@\s'\"]+@[^\s'\"]+",
        0.85,
        "Network",
    ),
    # Sensitive data
    _secret(
        "credit-card",
        "Credit Card Number",
        r"\b(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|3[47][0-9]{13}"
        r"|3[0-9]{13}|6(?:011|5[0-9]{2})[0-9]{12})\b",
        0.85,
        "Sensitive Data",
    ),
    _secret(
        "ssn",
        "Social Security Number",
        r"\b\d{3}-\d{2}-\d{4}\b",
        0.8,
        "Sensitive Data",
    ),
    _secret(
        "email",
        "Email Address",
        r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b",
        0.5,
        "Sensitive Data",
    ),
    _secret(
        "phone",
        "Phone Number",
        r"(?<![\w.])\+?1?[-.\s]?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}\b",
        0.4,
        "Sensitive Data",
    ),
    # Hashes and encoded blobs
    _secret(
        "md5-hash",
        "MD5 Hash",
        r"\b[a-f0-9]{32}\b",
        0.3,
        "Hashes",
        re.IGNORECASE,
    ),
    _secret(
        "sha1-hash",
        "SHA1 Hash",
        r"\b[a-f0-9]{40}\b",
        0.3,
        "Hashes",
        re.IGNORECASE,
    ),
    _secret(
        "sha256-hash",
        "SHA256 Hash",
        r"\b[a-f0-9]{64}\b",
        0.3,
        "Hashes",
        re.IGNORECASE,
    ),
    _secret(
        "base64-blob",
        "Base64 Encoded (Potential)",
        # At least 20 chars, with a digit and an upper-case letter somewhere
        r"(?<![A-Za-z0-9+/])(?=[A-Za-z0-9+/]*[0-9])(?=[A-Za-z0-9+/]*[A-Z])"
        r"[A-Za-z0-9+/]{20,}={0,2}",
        0.2,
        "Encoded Data",
    ),
]

BUCKETS: dict[str, str] = {}
DEFAULT_BUCKET = "secrets"
