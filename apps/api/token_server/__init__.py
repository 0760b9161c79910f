"""RTC token server: issues short-lived Agora channel tokens."""
