"""cyboot: Cypress binary bootstrap for npm, pnpm and yarn."""

__version__ = "0.1.0"
