"""Process step workflows: manual step handling, checklist and subscription processes."""
