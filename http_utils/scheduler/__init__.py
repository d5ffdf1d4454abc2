"""Cron scheduling of recurring fetch cycles."""

from http_utils.scheduler.cron import CronJob, cronify, parse_cron


__all__ = ["CronJob", "cronify", "parse_cron"]
