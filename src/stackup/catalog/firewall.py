# catalog/firewall.py
from __future__ import annotations

import shlex
from typing import List

from ..dsl import sh, step
from ..model import Step


WEB_PORTS = (80, 443)
RULES_FILE = "/etc/iptables/rules.v4"


def _rule(port: int) -> str:
    return f"INPUT -p tcp --dport {port} -j ACCEPT"


def allow_port(port: int) -> Step:
    # -C tells whether the rule is present; inserting again would duplicate it
    return step(
        f"firewall: allow tcp/{port}",
        sh(f"iptables -I {_rule(port)}", sudo=True),
        check=sh(f"iptables -C {_rule(port)}", sudo=True),
        verify_with_check=True,
    )


def persist_rules(ports=WEB_PORTS) -> Step:
    # iptables-save writes "-A INPUT -p tcp -m tcp --dport 80 -j ACCEPT"
    greps = " && ".join(
        f"grep -qE -- '^-A INPUT .*--dport {port} -j ACCEPT' {RULES_FILE}" for port in ports
    )
    return step(
        "firewall: persist rules",
        sh("netfilter-persistent save", sudo=True),
        # rules.v4 may be unreadable for ordinary users
        check=sh(f"sh -c {shlex.quote(greps)}", sudo=True),
        verify_with_check=True,
    )


def firewall_steps() -> List[Step]:
    return [*(allow_port(p) for p in WEB_PORTS), persist_rules()]
