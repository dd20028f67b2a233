"""Pattern tables for the Rule of Two capability detectors.

All tables are ordered tuples: the first matching entry in a table names
the reason, so more specific entries come before broader ones.
"""
from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Capability A: untrustworthy input
# ---------------------------------------------------------------------------

UNTRUSTED_PATH_PATTERNS: tuple[str, ...] = (
    "/tmp/",
    "/var/tmp/",
    "/dev/shm/",
    "/downloads/",
    "/Downloads/",
    "~/Downloads/",
)

# Home trees are trusted for reads outside the project directory.
TRUSTED_HOME_PREFIXES: tuple[str, ...] = ("/Users/", "/home/")

UNTRUSTED_CONTENT_MARKERS: tuple[str, ...] = (
    "${",
    "$(",
    "`",
    "eval(",
)

EXTERNAL_DATA_COMMANDS: tuple[str, ...] = (
    "curl",
    "wget",
    "fetch",
    "http",
    "nc ",
    "netcat",
    # Version control
    "git clone",
    "git pull",
    "git fetch",
    "svn checkout",
    "svn update",
    "hg clone",
    "hg pull",
    # Alternative downloaders
    "aria2c",
    "lynx -source",
    "w3m -dump",
)

OBFUSCATION_PATTERNS: tuple[str, ...] = (
    "base64 -d",
    "base64 --decode",
    "xxd -r",
    "| bash",
    "| sh",
    "| zsh",
    "| /bin/bash",
    "| /bin/sh",
    "eval ",
    "source <(",
    ". <(",
)

REVERSE_SHELL_PATTERNS: tuple[str, ...] = (
    "/dev/tcp/",
    "/dev/udp/",
    "nc -e",
    "nc -c",
    "ncat -e",
    "ncat -c",
    "socat exec:",
    "bash -i >",
    "sh -i >",
    "mkfifo",
    "0<&1",
    ">&0 2>&0",
)

PIPE_FROM_EXTERNAL_RE: re.Pattern[str] = re.compile(r"(curl|wget|nc|netcat)\s+[^|]*\|")

# ---------------------------------------------------------------------------
# Capability B: sensitive access
# ---------------------------------------------------------------------------

SENSITIVE_PATH_PATTERNS: tuple[str, ...] = (
    ".env",
    ".aws/",
    ".ssh/",
    ".kube/",
    ".gnupg/",
    ".npmrc",
    ".pypirc",
    ".netrc",
    ".docker/config.json",
    "credentials",
    "secrets",
    "id_rsa",
    "id_ed25519",
    "id_ecdsa",
    "id_dsa",
    "known_hosts",
    "authorized_keys",
    # Cloud CLI configs
    ".config/gcloud/",
    ".azure/",
    ".config/doctl/",
    ".oci/",
    ".config/gh/",
    ".config/hub",
    # Package manager credentials
    ".gem/credentials",
    ".cargo/credentials",
    ".gradle/gradle.properties",
    ".m2/settings.xml",
    ".composer/auth.json",
    ".terraform.d/credentials",
    ".terraformrc",
    # Database credentials
    ".pgpass",
    ".my.cnf",
    ".mysql_history",
    # VCS config
    ".git/config",
    ".gitconfig",
    ".htpasswd",
)

SENSITIVE_FILE_EXTENSIONS: tuple[str, ...] = (
    ".pem",
    ".key",
    ".p12",
    ".pfx",
    ".crt",
    ".cer",
)

SENSITIVE_COMMANDS: tuple[str, ...] = (
    "aws ",
    "kubectl ",
    "gcloud ",
    "az ",
    "terraform ",
    "vault ",
    "op ",  # 1Password
    "pass ",  # password-store
    "gpg ",
    "ssh-add",
    "ssh-keygen",
    "doctl ",
    "linode-cli ",
    "heroku ",
    "oci ",
    "ibmcloud ",
    "flyctl ",
    "podman ",
    "buildah ",
    "helm ",
    "oc ",  # OpenShift
    "nomad ",
    "consul ",
    "ansible ",
    "ansible-playbook ",
    "psql ",
    "mysql ",
    "mongo ",
    "mongosh ",
    "redis-cli ",
)

PRODUCTION_INDICATORS: tuple[str, ...] = (
    "/prod/",
    "/production/",
    "prd-",
    "prod-",
    "-prod",
    "-prd",
    ".prod.",
    ".production.",
)

# ---------------------------------------------------------------------------
# Capability C: state change / external communication
# ---------------------------------------------------------------------------

STATE_CHANGING_COMMANDS: tuple[str, ...] = (
    "rm ",
    "rm\t",
    "rmdir ",
    "mv ",
    "cp ",
    "chmod ",
    "chown ",
    "touch ",
    "mkdir ",
    "ln ",
    "install ",
    "git commit",
    "git push",
    "git checkout",
    "git reset",
    "git rebase",
    "git merge",
    "npm install",
    "npm publish",
    "npm update",
    "yarn add",
    "yarn install",
    "pip install",
    "pip uninstall",
    "docker run",
    "docker exec",
    "docker build",
    "docker push",
    "kubectl apply",
    "kubectl delete",
    "kubectl exec",
    "kubectl create",
    "kubectl patch",
    "terraform apply",
    "terraform destroy",
    "terraform import",
    "make ",
    "make\t",
    "shred ",
    "truncate ",
    "dd if=",
    # In-place stream editors
    "sed -i",
    "perl -i",
    # Process signaling
    "kill ",
    "killall ",
    "pkill ",
    "systemctl ",
    "go install",
    "go get ",
    "cargo install",
    "gem install",
    "composer install",
    "composer update",
    "brew install",
    "brew uninstall",
    "apt install",
    "apt-get install",
    "apt remove",
    "yum install",
    "dnf install",
    "pacman -S",
    "snap install",
    "podman run",
    "podman exec",
    "podman build",
    "docker-compose up",
    "docker-compose down",
    "ansible-playbook ",
    "pulumi up",
    "pulumi destroy",
    "rclone ",
    "s3cmd ",
    "gsutil ",
    "az storage ",
)

EXTERNAL_COMM_PATTERNS: tuple[str, ...] = (
    "curl",
    "wget",
    "ssh ",
    "scp ",
    "rsync ",
    "sftp ",
    "ftp ",
    "nc ",
    "netcat ",
    "ncat ",
    "telnet ",
    "nmap ",
    "socat ",
    "/dev/tcp/",
    "/dev/udp/",
)

# Matched case-sensitively against the raw command.
REDIRECT_PATTERNS: tuple[str, ...] = (
    " > ",
    " >> ",
    " >| ",
    " 2> ",
    " 2>> ",
    " &> ",
    " &>> ",
)
