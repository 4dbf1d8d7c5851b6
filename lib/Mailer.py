#!/usr/bin/env python3
from email.mime.text import MIMEText
import logging
import smtplib
from lib.config import EmailConfig


def _connect(cfg: EmailConfig) -> smtplib.SMTP:
    if cfg.use_ssl:
        return smtplib.SMTP_SSL(cfg.smtp_host, cfg.smtp_port, timeout=30)
    return smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=30)


def sendmail(cfg: EmailConfig, subject: str, message: str) -> bool:
    """Send a single plain-text message through the configured SMTP relay.

    Returns True when the relay accepted the message.
    """
    msg = MIMEText(message, "plain", "utf-8")
    msg["From"] = cfg.from_addr
    msg["To"] = cfg.to_addr
    msg["Subject"] = subject

    try:
        with _connect(cfg) as server:
            server.ehlo()
            if not cfg.use_ssl:
                server.starttls()
                server.ehlo()
            if cfg.smtp_password:
                server.login(cfg.smtp_username, cfg.smtp_password)
            server.sendmail(cfg.from_addr, [cfg.to_addr], msg.as_string())
        logging.info(f"Email sent to {cfg.to_addr} via {cfg.smtp_host}:{cfg.smtp_port}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logging.error(f"Sending email via {cfg.smtp_host} failed: {e}")
        return False
