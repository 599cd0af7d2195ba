"""Starter .reporules.toml template."""

DEFAULT_TOML = """\
# reporules configuration
version = "1.0"

[actor]
bypass_eligible = false   # may the current actor bypass rulesets that allow it?

[output]
format = "terminal"       # terminal | json
show_summary = true

# One [[rules]] table per configured rule.
#   type        creation | update | required_deployments | required_signatures |
#               required_status_checks | pull_request | commit_message_pattern |
#               commit_author_email_pattern | committer_email_pattern |
#               branch_name_pattern
#   operator    starts_with | ends_with | contains | regex   (pattern rules only)
#   negate      true to require the pattern NOT to match
#   bypass      "always" | "pull_requests_only" | "never"   (or true / false)
#   enforcement active | evaluate | disabled   (only active rules are enforced)
#   ruleset     free-form label shown in error messages

# [[rules]]
# type = "branch_name_pattern"
# operator = "starts_with"
# pattern = "wip/"
# negate = true

# [[rules]]
# type = "commit_message_pattern"
# operator = "contains"
# pattern = "JIRA-"
# bypass = "always"
"""
