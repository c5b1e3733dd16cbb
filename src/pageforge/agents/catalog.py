"""Curated page examples and design styles used as prompt references."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UIExample:
    name: str
    description: str
    key_features: tuple[str, ...]
    design_patterns: tuple[str, ...]
    color_scheme: str | None = None


@dataclass(frozen=True)
class PageTypeExamples:
    page_type: str
    examples: tuple[UIExample, ...]
    layout_patterns: tuple[str, ...]
    conversion_tips: tuple[str, ...]
    section_order: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DesignStyle:
    name: str
    description: str
    characteristics: tuple[str, ...]
    color_guidelines: str
    typography_guidelines: str


CURATED_EXAMPLES: dict[str, PageTypeExamples] = {
    "landing": PageTypeExamples(
        page_type="landing",
        examples=(
            UIExample(
                "Stripe",
                "Clean, professional fintech landing with animated gradients and clear value proposition",
                (
                    "Animated gradient hero background",
                    "Split hero with product preview",
                    "Floating UI elements and cards",
                    "Clear pricing CTAs",
                    "Trust badges and client logos",
                ),
                ("gradient-hero", "floating-cards", "split-layout", "animated-backgrounds"),
                "Purple/blue gradients with white backgrounds",
            ),
            UIExample(
                "Linear",
                "Dark theme, sleek software product page with smooth animations",
                (
                    "Dark theme with accent colors",
                    "Product screenshots with glow effects",
                    "Feature grid with icons",
                    "Keyboard shortcut hints",
                    "Minimalist footer",
                ),
                ("dark-mode", "glow-effects", "feature-grid", "minimal-ui"),
                "Dark background with purple/blue accents",
            ),
            UIExample(
                "Vercel",
                "Developer-focused, modern tech landing with code examples",
                (
                    "Code snippet previews",
                    "Terminal-style animations",
                    "Framework logos grid",
                    "Performance metrics display",
                ),
                ("code-preview", "terminal-ui", "metrics-display", "logo-grid"),
                "Black and white with subtle gradients",
            ),
            UIExample(
                "Notion",
                "Clean, minimal SaaS landing with product demonstration",
                (
                    "Animated product demo in hero",
                    "Use case tabs/sections",
                    "Template gallery showcase",
                    "Simple, clear CTAs",
                ),
                ("product-demo", "use-case-tabs", "template-gallery", "simple-ctas"),
                "White background with black text and accent colors",
            ),
            UIExample(
                "Airbnb",
                "Immersive travel landing with search-focused hero",
                (
                    "Full-width hero image",
                    "Prominent search bar",
                    "Location cards carousel",
                    "Host testimonials",
                ),
                ("full-hero-image", "search-focused", "card-carousel", "categories-grid"),
                "White with coral/pink accents",
            ),
        ),
        layout_patterns=(
            "Hero with centered headline and two CTAs",
            "Split hero with text left, image/product right",
            "Full-width hero with gradient overlay",
            "Video background hero",
            "Interactive product showcase hero",
        ),
        conversion_tips=(
            "Place primary CTA above the fold",
            "Use social proof near CTAs",
            "Limit form fields to essential only",
            "Show pricing early for transparent positioning",
            "Include trust badges and security indicators",
        ),
        section_order=(
            "Hero",
            "Social Proof/Logos",
            "Features",
            "How It Works",
            "Testimonials",
            "Pricing",
            "FAQ",
            "Final CTA",
            "Footer",
        ),
    ),
    "pricing": PageTypeExamples(
        page_type="pricing",
        examples=(
            UIExample(
                "Notion Pricing",
                "Simple 3-tier pricing with highlighted recommended plan",
                (
                    "Three-column tier layout",
                    "Popular plan badge",
                    "Feature comparison checkmarks",
                    "Monthly/yearly toggle",
                ),
                ("three-tier", "highlighted-plan", "toggle-billing", "feature-checkmarks"),
                "White cards with blue accents",
            ),
            UIExample(
                "Slack Pricing",
                "Enterprise-focused pricing with detailed feature breakdown",
                (
                    "Clear tier differentiation",
                    "Per-user pricing display",
                    "Full feature comparison table",
                    "Enterprise contact CTA",
                ),
                ("per-user-pricing", "comparison-table", "enterprise-focus", "contact-sales"),
                "Purple gradient headers with white backgrounds",
            ),
            UIExample(
                "Zoom Pricing",
                "Comprehensive comparison table with multiple tiers",
                (
                    "Horizontal comparison table",
                    "Feature grouping by category",
                    "Free tier prominent",
                ),
                ("comparison-table", "feature-categories", "free-tier", "add-ons"),
                "Blue headers with white/gray alternating rows",
            ),
        ),
        layout_patterns=(
            "Three-column card layout with center highlighted",
            "Horizontal comparison table",
            "Two-tier simple layout (Free vs Pro)",
            "Calculator-style interactive pricing",
        ),
        conversion_tips=(
            "Highlight the most popular or recommended plan",
            "Use annual billing toggle to show savings",
            "Include money-back guarantee badge",
            "Add FAQ section addressing pricing concerns",
        ),
        section_order=(
            "Header with Toggle",
            "Pricing Cards",
            "Feature Comparison",
            "FAQ",
            "Enterprise CTA",
            "Footer",
        ),
    ),
    "about": PageTypeExamples(
        page_type="about",
        examples=(
            UIExample(
                "Stripe About",
                "Mission-driven company page with global impact visuals",
                (
                    "Mission statement hero",
                    "Timeline/history section",
                    "Team leadership grid",
                    "Company values icons",
                ),
                ("mission-hero", "timeline", "world-map", "team-grid", "values-section"),
                "Clean white with brand accent colors",
            ),
            UIExample(
                "Figma About",
                "Creative, design-focused team page",
                (
                    "Large team photo hero",
                    "Design philosophy section",
                    "Community highlights",
                    "Open positions teaser",
                ),
                ("photo-hero", "philosophy-section", "community-focus", "careers-cta"),
                "White with colorful accents",
            ),
        ),
        layout_patterns=(
            "Hero with company photo/video",
            "Story timeline with milestones",
            "Values grid with icons",
            "Team cards with photos and roles",
            "Statistics/impact numbers row",
        ),
        conversion_tips=(
            "Lead with mission and values",
            "Include founder story for authenticity",
            "Show real team photos, not stock",
            "Include clear contact/careers CTAs",
        ),
        section_order=("Mission Hero", "Our Story", "Values", "Team", "Statistics", "Careers CTA", "Footer"),
    ),
    "contact": PageTypeExamples(
        page_type="contact",
        examples=(
            UIExample(
                "Intercom Contact",
                "Multi-channel contact page with chat widget",
                (
                    "Contact form with department selector",
                    "Live chat widget",
                    "Office addresses with maps",
                    "Response time indicators",
                ),
                ("multi-channel", "chat-widget", "office-maps", "response-times"),
                "White with blue accents",
            ),
            UIExample(
                "HubSpot Contact",
                "Sales-focused contact with meeting scheduler",
                (
                    "Meeting scheduler embed",
                    "Phone and email options",
                    "Regional offices",
                    "Support portal link",
                ),
                ("meeting-scheduler", "multi-contact", "regional-offices", "social-links"),
                "Orange accents with white background",
            ),
        ),
        layout_patterns=(
            "Split layout: form left, contact info right",
            "Full-width form with map below",
            "Tab-based (Sales, Support, General)",
            "Card-based contact methods",
        ),
        conversion_tips=(
            "Minimize form fields (name, email, message)",
            "Show expected response time",
            "Offer multiple contact methods",
            "Add FAQ link to reduce submissions",
        ),
        section_order=("Header", "Contact Form/Methods", "Office Locations", "FAQ", "Footer"),
    ),
    "blog": PageTypeExamples(
        page_type="blog",
        examples=(
            UIExample(
                "Stripe Blog",
                "Clean, professional tech blog with categories",
                (
                    "Featured article hero",
                    "Category filters",
                    "Card grid layout",
                    "Read time indicators",
                ),
                ("featured-hero", "category-filters", "card-grid", "read-time", "author-cards"),
                "White with subtle gradients",
            ),
            UIExample(
                "Medium",
                "Reading-focused blog with clean typography",
                (
                    "Large typography",
                    "Minimal distractions",
                    "Related articles sidebar",
                    "Newsletter signup",
                ),
                ("large-type", "minimal-ui", "related-sidebar", "newsletter-cta"),
                "Black text on white, green accents",
            ),
        ),
        layout_patterns=(
            "Featured post hero + grid below",
            "Sidebar with categories and popular posts",
            "Masonry grid layout",
            "List view with thumbnails",
        ),
        conversion_tips=(
            "Highlight featured/latest content prominently",
            "Include newsletter signup in multiple places",
            "Show reading time estimates",
            "Include social sharing buttons",
        ),
        section_order=("Featured Post", "Category Filter", "Post Grid", "Newsletter Signup", "Footer"),
    ),
    "product": PageTypeExamples(
        page_type="product",
        examples=(
            UIExample(
                "Apple Product Page",
                "Immersive product showcase with scroll animations",
                (
                    "Full-screen product hero",
                    "Scroll-triggered animations",
                    "Specs comparison",
                    "Buy now sticky CTA",
                ),
                ("immersive-hero", "scroll-animations", "specs-table", "gallery-360", "sticky-cta"),
                "White/black with product colors",
            ),
            UIExample(
                "Shopify Product",
                "E-commerce focused with variants and reviews",
                (
                    "Image gallery with zoom",
                    "Variant selector (size, color)",
                    "Customer reviews section",
                    "Related products carousel",
                ),
                ("image-gallery", "variant-selector", "reviews-section", "related-products"),
                "Clean white with brand accents",
            ),
        ),
        layout_patterns=(
            "Split layout: images left, details right",
            "Full-width hero with scrolling features",
            "Tab-based (Overview, Specs, Reviews)",
            "Single column with sections",
        ),
        conversion_tips=(
            "Show price prominently",
            "Include high-quality images/videos",
            "Add social proof near buy button",
            "Include shipping/return info",
        ),
        section_order=("Product Hero", "Features", "Specifications", "Reviews", "Related Products", "Footer"),
    ),
    "dashboard": PageTypeExamples(
        page_type="dashboard",
        examples=(
            UIExample(
                "Google Analytics",
                "Data-rich dashboard with charts and metrics",
                (
                    "KPI cards at top",
                    "Interactive charts",
                    "Date range picker",
                    "Data tables with filters",
                ),
                ("kpi-cards", "interactive-charts", "date-picker", "data-tables", "export-actions"),
                "White background with blue/green data viz colors",
            ),
            UIExample(
                "Shopify Dashboard",
                "E-commerce metrics with quick actions",
                (
                    "Revenue overview cards",
                    "Order status summary",
                    "Quick action buttons",
                    "Inventory alerts",
                ),
                ("metric-cards", "status-summary", "quick-actions", "recent-list", "alerts"),
                "Light gray background with green/blue accents",
            ),
        ),
        layout_patterns=(
            "Sidebar navigation + main content area",
            "Top stats row + charts grid below",
            "Tab-based sections (Overview, Sales, Users)",
            "Card-based modular layout",
        ),
        conversion_tips=(
            "Show most important metrics first",
            "Use color coding for status (green=good, red=alert)",
            "Include date/time context for all data",
            "Provide quick actions for common tasks",
        ),
        section_order=("Header/Navigation", "KPI Cards", "Main Charts", "Data Tables", "Recent Activity"),
    ),
    "portfolio": PageTypeExamples(
        page_type="portfolio",
        examples=(
            UIExample(
                "Behance Portfolio",
                "Visual-first portfolio with project showcases",
                (
                    "Hero with personal branding",
                    "Project grid/masonry",
                    "Case study deep dives",
                    "Contact CTA",
                ),
                ("hero-branding", "project-grid", "case-studies", "skills-section", "contact-cta"),
                "Depends on personal brand, often minimal",
            ),
            UIExample(
                "Dribbble Profile",
                "Shot-based portfolio with interactions",
                (
                    "Profile header with stats",
                    "Work samples grid",
                    "Availability status",
                    "Social links",
                ),
                ("profile-header", "shots-grid", "interactions", "availability", "social-links"),
                "Pink accents with white background",
            ),
        ),
        layout_patterns=(
            "Full-width hero + project grid",
            "Split intro: photo left, bio right",
            "Single column case study flow",
            "Masonry grid with filters",
        ),
        conversion_tips=(
            "Lead with your best work",
            "Include clear contact/hire CTA",
            "Show project process, not just results",
            "Add testimonials from clients",
        ),
        section_order=("Hero/Intro", "Selected Work", "About", "Skills", "Testimonials", "Contact", "Footer"),
    ),
}


DESIGN_STYLES: dict[str, DesignStyle] = {
    "minimal": DesignStyle(
        "minimal",
        "Clean, whitespace-focused design with subtle interactions",
        (
            "Generous whitespace",
            "Limited color palette (2-3 colors)",
            "Simple sans-serif typography",
            "Subtle shadows and borders",
        ),
        "Use white/light gray backgrounds, one accent color, dark text",
        "Clean sans-serif fonts, large headings, comfortable line height",
    ),
    "bold": DesignStyle(
        "bold",
        "High-impact design with strong visuals and contrast",
        ("Large, bold typography", "High contrast colors", "Full-width sections", "Impactful imagery"),
        "Use contrasting colors, bold accent colors, dark backgrounds with light text",
        "Extra bold headings, impactful font sizes, tight letter spacing",
    ),
    "corporate": DesignStyle(
        "corporate",
        "Professional, trustworthy design for business audiences",
        (
            "Conservative color palette",
            "Professional photography",
            "Clear information hierarchy",
            "Trust-building elements",
        ),
        "Blue, gray, white color schemes, subtle gradients, professional feel",
        "Professional serif or sans-serif, moderate sizes, formal tone",
    ),
    "playful": DesignStyle(
        "playful",
        "Fun, engaging design with personality and character",
        ("Bright, vibrant colors", "Rounded shapes and buttons", "Illustrations and icons", "Casual copy tone"),
        "Use bright, cheerful colors, gradients, colorful illustrations",
        "Rounded or friendly fonts, varied sizes, casual tone",
    ),
    "neobrutalist": DesignStyle(
        "neobrutalist",
        "Raw, intentionally unpolished design with bold elements",
        ("Harsh shadows and borders", "Bold, clashing colors", "Asymmetric layouts", "Strong black outlines"),
        "Primary colors, black outlines, high contrast combinations",
        "Bold, chunky fonts, monospace elements, intentional roughness",
    ),
    "glassmorphism": DesignStyle(
        "glassmorphism",
        "Frosted glass effects with transparency and blur",
        ("Frosted glass cards", "Background blur effects", "Subtle gradients", "Light transparency"),
        "Soft gradients, white/transparent cards with blur, pastel accents",
        "Light fonts, white text on blurred backgrounds, elegant feel",
    ),
    "dark": DesignStyle(
        "dark",
        "Dark theme design with accent colors and glow effects",
        ("Dark backgrounds", "Glowing accent colors", "High contrast text", "Modern, tech feel"),
        "Dark gray/black backgrounds, neon or bright accents, white text",
        "Clean sans-serif, good contrast ratios, subtle glow effects on headings",
    ),
    "gradient": DesignStyle(
        "gradient",
        "Rich gradient backgrounds and colorful transitions",
        ("Multi-color gradients", "Smooth color transitions", "Vibrant hero sections", "Colorful CTAs"),
        "Use purple/blue/pink gradients, smooth transitions, white overlay text",
        "Clean fonts, white or dark text depending on background, bold headings",
    ),
}

DEFAULT_PAGE_TYPE = "landing"
DEFAULT_DESIGN_STYLE = "minimal"
