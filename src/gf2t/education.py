"""Curated reading on trunk-based development and Git Flow."""

from __future__ import annotations

from .core.models import LinkCategory, ReferenceLink

# Display labels, in the order topics are printed
CATEGORIES: dict[LinkCategory, str] = {
    LinkCategory.TRUNK_BASED_DEV: "🌳 Trunk-Based Development",
    LinkCategory.GIT_FLOW: "🔀 Git Flow",
    LinkCategory.FEATURE_FLAGS: "🚩 Feature Flags",
    LinkCategory.CI_CD: "🔄 CI/CD Best Practices",
}

REFERENCE_LINKS: list[ReferenceLink] = [
    # Trunk-based development
    ReferenceLink(
        title="Trunk Based Development",
        url="https://trunkbaseddevelopment.com",
        category=LinkCategory.TRUNK_BASED_DEV,
        description="The definitive guide by Paul Hammant",
    ),
    ReferenceLink(
        title="Google Cloud — Trunk-Based Development",
        url="https://cloud.google.com/architecture/devops/devops-tech-trunk-based-development",
        category=LinkCategory.TRUNK_BASED_DEV,
        description="DORA research on trunk-based development and its impact on delivery performance",
    ),
    ReferenceLink(
        title="Atlassian — Trunk-Based Development",
        url="https://www.atlassian.com/continuous-delivery/continuous-integration/trunk-based-development",
        category=LinkCategory.TRUNK_BASED_DEV,
        description="Atlassian's overview of trunk-based development practices",
    ),
    ReferenceLink(
        title="Branching Patterns — Martin Fowler",
        url="https://martinfowler.com/articles/branching-patterns.html",
        category=LinkCategory.TRUNK_BASED_DEV,
        description="Comprehensive analysis of branching patterns including trunk-based development",
    ),
    # Git Flow
    ReferenceLink(
        title="A Successful Git Branching Model",
        url="https://nvie.com/posts/a-successful-git-branching-model/",
        category=LinkCategory.GIT_FLOW,
        description="Original Git Flow post by Vincent Driessen (includes 2020 reflection recommending simpler models)",
    ),
    ReferenceLink(
        title="Atlassian — Gitflow Workflow",
        url="https://www.atlassian.com/git/tutorials/comparing-workflows/gitflow-workflow",
        category=LinkCategory.GIT_FLOW,
        description="Atlassian Git Flow tutorial and workflow explanation",
    ),
    # Feature flags
    ReferenceLink(
        title="Feature Toggles — Martin Fowler",
        url="https://martinfowler.com/articles/feature-toggles.html",
        category=LinkCategory.FEATURE_FLAGS,
        description="Comprehensive guide to feature toggles (flags), a key enabler for trunk-based development",
    ),
    ReferenceLink(
        title="What Are Feature Flags?",
        url="https://launchdarkly.com/blog/what-are-feature-flags/",
        category=LinkCategory.FEATURE_FLAGS,
        description="Introduction to feature flags and how they enable continuous delivery",
    ),
    # CI/CD
    ReferenceLink(
        title="Minimum Viable CD",
        url="https://minimumcd.org",
        category=LinkCategory.CI_CD,
        description="Minimum Viable Continuous Delivery checklist, prerequisites for trunk-based development",
    ),
    ReferenceLink(
        title="DORA — DevOps Research and Assessment",
        url="https://dora.dev",
        category=LinkCategory.CI_CD,
        description="DORA metrics and research on DevOps performance and delivery capabilities",
    ),
]


def get_links_by_category(category: LinkCategory | str) -> list[ReferenceLink]:
    """Return the reference links for *category* (enum or its string value)."""
    wanted = LinkCategory(category)
    return [link for link in REFERENCE_LINKS if link.category == wanted]
