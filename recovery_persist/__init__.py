"""recovery-persist: persistência dos logs de recovery após reboot."""

__version__ = "1.0.0"
