# /concierge/workflows/definitions.py

"""
Workflow catalogs as pure data (no logic).

VENDOR_WORKFLOWS: qualifying flows run before matching a user with vendors.
Each has an intro, ordered questions (single_select or multi_select, each
option optionally `exclusive`), a recap, and matching weights used by the
vendor-matching backend.

FALLBACK_WORKFLOW: the generic survey served for ids not found in either catalog.

MINI_ASSESSMENT_WORKFLOWS: yes/no plus free-text list builders. Each answer
becomes one task built from the workflow's taskTemplate.

Keys are camelCase because these dicts are also the wire payloads.
"""

from typing import Dict, Any

WorkflowData = Dict[str, Any]

VENDOR_WORKFLOWS: Dict[str, WorkflowData] = {
    "book_movers": {
        "intro": {
            "title": "Let's find you the right movers",
            "subtitle": "A few quick questions to match you with companies that fit your move. Takes about 30 seconds."
        },
        "questions": [
            {
                "id": "priority",
                "question": "What matters most to you?",
                "type": "single_select",
                "options": [
                    {"id": "price", "label": "Lowest Price", "icon": "dollarsign.circle.fill"},
                    {"id": "reviews", "label": "Best Reviews", "icon": "star.fill"},
                    {"id": "speed", "label": "Fastest Available", "icon": "clock.fill"},
                    {"id": "full_service", "label": "Full Service", "icon": "hands.sparkles.fill"}
                ]
            },
            {
                "id": "special_items",
                "question": "Any of these items?",
                "type": "multi_select",
                "subtitle": "These need special handling",
                "options": [
                    {"id": "piano", "label": "Piano", "icon": "pianokeys"},
                    {"id": "safe", "label": "Heavy Safe", "icon": "lock.square.fill"},
                    {"id": "art", "label": "Art/Antiques", "icon": "photo.artframe"},
                    {"id": "pool_table", "label": "Pool Table", "icon": "circle.fill"},
                    {"id": "none", "label": "None of These", "icon": "checkmark.circle.fill", "exclusive": True}
                ]
            },
            {
                "id": "packing_help",
                "question": "Need help packing?",
                "type": "single_select",
                "options": [
                    {"id": "full", "label": "Pack Everything", "subtitle": "They pack, you relax", "icon": "shippingbox.fill"},
                    {"id": "fragile", "label": "Fragile Items Only", "subtitle": "Dishes, mirrors, TVs", "icon": "wineglass"},
                    {"id": "none", "label": "I'll Handle It", "subtitle": "Just need transport", "icon": "hand.raised.fill"}
                ]
            },
            {
                "id": "access_issues",
                "question": "Any tricky access?",
                "type": "multi_select",
                "subtitle": "At either location",
                "options": [
                    {"id": "stairs", "label": "Stairs (No Elevator)", "icon": "figure.stairs"},
                    {"id": "long_walk", "label": "Long Carry", "subtitle": "Parking far from door", "icon": "figure.walk"},
                    {"id": "narrow", "label": "Narrow Doorways", "icon": "door.left.hand.closed"},
                    {"id": "none", "label": "Easy Access", "icon": "checkmark.circle.fill", "exclusive": True}
                ]
            }
        ],
        "recap": {
            "title": "Got it. Here's what I heard:",
            "closing": "I'm reaching out to your top 3 matches now. You'll have quotes within 24 hours.",
            "button": "Sounds Good"
        },
        "matching": {"priorityWeight": 0.4, "specialItemsWeight": 0.3, "servicesWeight": 0.2, "accessWeight": 0.1}
    },

    "book_long_distance_movers": {
        "intro": {
            "title": "Long-distance moves need the right team",
            "subtitle": "Let me match you with movers who specialize in cross-country relocations. This takes about a minute."
        },
        "questions": [
            {
                "id": "priority",
                "question": "What's most important?",
                "type": "single_select",
                "options": [
                    {"id": "price", "label": "Best Price", "subtitle": "Budget is tight", "icon": "dollarsign.circle.fill"},
                    {"id": "speed", "label": "Fastest Delivery", "subtitle": "Need it ASAP", "icon": "clock.fill"},
                    {"id": "care", "label": "White Glove Care", "subtitle": "Handle with care", "icon": "hands.sparkles.fill"},
                    {"id": "tracking", "label": "Real-Time Tracking", "subtitle": "Know where it is", "icon": "location.fill"}
                ]
            },
            {
                "id": "estimate_type",
                "question": "How should pricing work?",
                "type": "single_select",
                "subtitle": "This affects your final bill",
                "options": [
                    {"id": "binding", "label": "Binding Estimate", "subtitle": "Locked price, no surprises", "icon": "lock.fill"},
                    {"id": "not_binding", "label": "Non-Binding", "subtitle": "May change based on actual weight", "icon": "scale.3d"},
                    {"id": "not_sure", "label": "Not Sure", "subtitle": "Help me decide", "icon": "questionmark.circle.fill"}
                ]
            },
            {
                "id": "special_items",
                "question": "Any specialty items?",
                "type": "multi_select",
                "options": [
                    {"id": "piano", "label": "Piano", "icon": "pianokeys"},
                    {"id": "vehicle", "label": "Vehicle to Ship", "icon": "car.fill"},
                    {"id": "art", "label": "Fine Art", "icon": "photo.artframe"},
                    {"id": "antiques", "label": "Antiques", "icon": "clock.fill"},
                    {"id": "none", "label": "Standard Household", "icon": "checkmark.circle.fill", "exclusive": True}
                ]
            },
            {
                "id": "packing_service",
                "question": "Packing services?",
                "type": "single_select",
                "options": [
                    {"id": "full", "label": "Full Pack & Unpack", "subtitle": "Complete service", "icon": "shippingbox.fill"},
                    {"id": "pack_only", "label": "Packing Only", "subtitle": "I'll unpack myself", "icon": "shippingbox"},
                    {"id": "fragile", "label": "Fragile Items Only", "icon": "wineglass"},
                    {"id": "none", "label": "No Packing Needed", "icon": "xmark.circle.fill"}
                ]
            },
            {
                "id": "timeline_flexibility",
                "question": "How flexible is your timeline?",
                "type": "single_select",
                "subtitle": "Flexibility can mean better prices",
                "options": [
                    {"id": "exact", "label": "Exact Date", "subtitle": "Must be this day", "icon": "calendar.badge.exclamationmark"},
                    {"id": "window_3", "label": "3-Day Window", "subtitle": "Some flexibility", "icon": "calendar"},
                    {"id": "window_7", "label": "Week Window", "subtitle": "Very flexible", "icon": "calendar.badge.plus"}
                ]
            }
        ],
        "recap": {
            "title": "Perfect. Here's your move profile:",
            "closing": "I'm contacting licensed long-distance carriers now. Expect detailed quotes within 48 hours.",
            "button": "Get My Quotes"
        },
        "matching": {
            "priorityWeight": 0.35, "estimateTypeWeight": 0.25, "specialItemsWeight": 0.2,
            "packingWeight": 0.1, "flexibilityWeight": 0.1
        }
    },

    "cleaning_service": {
        "intro": {
            "title": "Let's get you a sparkling clean",
            "subtitle": "Quick questions to find cleaners who match your needs."
        },
        "questions": [
            {
                "id": "which_place",
                "question": "Which place needs cleaning?",
                "type": "single_select",
                "options": [
                    {"id": "old", "label": "Old Place", "subtitle": "Move-out clean", "icon": "door.left.hand.open"},
                    {"id": "new", "label": "New Place", "subtitle": "Before unpacking", "icon": "door.right.hand.open"},
                    {"id": "both", "label": "Both Places", "subtitle": "Full service", "icon": "arrow.left.arrow.right"}
                ]
            },
            {
                "id": "clean_level",
                "question": "What level of clean?",
                "type": "single_select",
                "options": [
                    {"id": "standard", "label": "Standard Clean", "subtitle": "Surface cleaning, vacuum, mop", "icon": "sparkles"},
                    {"id": "deep", "label": "Deep Clean", "subtitle": "Inside cabinets, appliances, baseboards", "icon": "bubbles.and.sparkles.fill"},
                    {"id": "move_out", "label": "Move-Out Special", "subtitle": "Get your deposit back", "icon": "dollarsign.circle.fill"}
                ]
            },
            {
                "id": "focus_areas",
                "question": "Any areas need extra attention?",
                "type": "multi_select",
                "options": [
                    {"id": "kitchen", "label": "Kitchen", "subtitle": "Appliances, grease", "icon": "refrigerator.fill"},
                    {"id": "bathrooms", "label": "Bathrooms", "subtitle": "Tile, grout, fixtures", "icon": "shower.fill"},
                    {"id": "windows", "label": "Windows", "subtitle": "Inside and out", "icon": "window.horizontal"},
                    {"id": "carpet", "label": "Carpet", "subtitle": "Steam cleaning", "icon": "square.fill"},
                    {"id": "none", "label": "Even Attention", "icon": "checkmark.circle.fill", "exclusive": True}
                ]
            },
            {
                "id": "timing",
                "question": "When do you need it?",
                "type": "single_select",
                "options": [
                    {"id": "asap", "label": "ASAP", "subtitle": "Within 48 hours", "icon": "bolt.fill"},
                    {"id": "this_week", "label": "This Week", "icon": "calendar"},
                    {"id": "scheduled", "label": "Specific Date", "subtitle": "Tied to move date", "icon": "calendar.badge.clock"}
                ]
            }
        ],
        "recap": {
            "title": "Here's your cleaning request:",
            "closing": "I'll have quotes from top-rated cleaners within 24 hours.",
            "button": "Get Quotes"
        },
        "matching": {"placeWeight": 0.2, "levelWeight": 0.35, "focusWeight": 0.25, "timingWeight": 0.2}
    },

    "junk_removal": {
        "intro": {
            "title": "Let's get rid of the stuff you don't need",
            "subtitle": "A few questions to get you an accurate quote."
        },
        "questions": [
            {
                "id": "volume",
                "question": "How much stuff?",
                "type": "single_select",
                "options": [
                    {"id": "few_items", "label": "A Few Items", "subtitle": "Fits in a car", "icon": "archivebox"},
                    {"id": "partial", "label": "Partial Truck", "subtitle": "Couch, mattress, some boxes", "icon": "box.truck"},
                    {"id": "full", "label": "Full Truck", "subtitle": "Garage cleanout, lots of stuff", "icon": "box.truck.fill"},
                    {"id": "not_sure", "label": "Not Sure", "subtitle": "Need an estimate", "icon": "questionmark.circle.fill"}
                ]
            },
            {
                "id": "item_types",
                "question": "What kinds of items?",
                "type": "multi_select",
                "options": [
                    {"id": "furniture", "label": "Furniture", "icon": "sofa.fill"},
                    {"id": "appliances", "label": "Appliances", "icon": "refrigerator.fill"},
                    {"id": "mattress", "label": "Mattress/Box Spring", "icon": "bed.double.fill"},
                    {"id": "electronics", "label": "Electronics", "icon": "tv.fill"},
                    {"id": "yard", "label": "Yard Waste", "icon": "leaf.fill"},
                    {"id": "general", "label": "General Junk", "icon": "trash.fill"}
                ]
            },
            {
                "id": "location",
                "question": "Where is everything?",
                "type": "single_select",
                "options": [
                    {"id": "curb", "label": "At the Curb", "subtitle": "Easy access", "icon": "road.lanes"},
                    {"id": "garage", "label": "Garage/Driveway", "icon": "car.garage.fill"},
                    {"id": "inside", "label": "Inside the Home", "subtitle": "They'll haul it out", "icon": "house.fill"},
                    {"id": "multiple", "label": "Multiple Spots", "icon": "arrow.triangle.branch"}
                ]
            },
            {
                "id": "timing",
                "question": "When do you need pickup?",
                "type": "single_select",
                "options": [
                    {"id": "asap", "label": "ASAP", "subtitle": "Within 48 hours", "icon": "bolt.fill"},
                    {"id": "before_move", "label": "Before Move Day", "subtitle": "Coordinate with timeline", "icon": "calendar"},
                    {"id": "flexible", "label": "Flexible", "subtitle": "Best price wins", "icon": "clock.fill"}
                ]
            }
        ],
        "recap": {
            "title": "Here's what we're removing:",
            "closing": "I'll get you quotes from haulers who can handle this. Usually within a few hours.",
            "button": "Get Quotes"
        },
        "matching": {"volumeWeight": 0.4, "itemTypesWeight": 0.25, "locationWeight": 0.15, "timingWeight": 0.2}
    },

    "internet_setup": {
        "intro": {
            "title": "Let's get you connected",
            "subtitle": "I'll find the best internet options at your new address."
        },
        "questions": [
            {
                "id": "usage",
                "question": "What's your internet mainly for?",
                "type": "single_select",
                "options": [
                    {"id": "work", "label": "Work From Home", "subtitle": "Video calls, uploads", "icon": "laptopcomputer"},
                    {"id": "streaming", "label": "Streaming", "subtitle": "Movies, gaming", "icon": "play.tv.fill"},
                    {"id": "basic", "label": "Basic Use", "subtitle": "Email, browsing", "icon": "globe"},
                    {"id": "heavy", "label": "Heavy Everything", "subtitle": "Multiple users, all the above", "icon": "wifi"}
                ]
            },
            {
                "id": "priority",
                "question": "What matters most?",
                "type": "single_select",
                "options": [
                    {"id": "speed", "label": "Fastest Speed", "subtitle": "Pay more, get more", "icon": "bolt.fill"},
                    {"id": "price", "label": "Best Price", "subtitle": "Budget-friendly", "icon": "dollarsign.circle.fill"},
                    {"id": "reliability", "label": "Most Reliable", "subtitle": "No dropouts", "icon": "checkmark.shield.fill"},
                    {"id": "no_contract", "label": "No Contract", "subtitle": "Flexibility", "icon": "xmark.circle.fill"}
                ]
            },
            {
                "id": "current_provider",
                "question": "Current internet provider?",
                "type": "single_select",
                "subtitle": "Sometimes we can transfer or get switch deals",
                "options": [
                    {"id": "xfinity", "label": "Xfinity/Comcast", "icon": "dot.radiowaves.left.and.right"},
                    {"id": "att", "label": "AT&T", "icon": "antenna.radiowaves.left.and.right"},
                    {"id": "verizon", "label": "Verizon Fios", "icon": "fibrechannel"},
                    {"id": "spectrum", "label": "Spectrum", "icon": "wifi"},
                    {"id": "other", "label": "Other / None", "icon": "questionmark.circle.fill"}
                ]
            },
            {
                "id": "extras",
                "question": "Need any extras?",
                "type": "multi_select",
                "options": [
                    {"id": "tv", "label": "TV Package", "icon": "tv.fill"},
                    {"id": "phone", "label": "Home Phone", "icon": "phone.fill"},
                    {"id": "mesh", "label": "Whole-Home WiFi", "subtitle": "Mesh system", "icon": "wifi.circle.fill"},
                    {"id": "none", "label": "Just Internet", "icon": "checkmark.circle.fill", "exclusive": True}
                ]
            }
        ],
        "recap": {
            "title": "Here's what you need:",
            "closing": "I'll check availability at your new address and set up the best option. Usually ready for move-in day.",
            "button": "Find My Options"
        },
        "matching": {"usageWeight": 0.35, "priorityWeight": 0.35, "currentProviderWeight": 0.1, "extrasWeight": 0.2}
    },

    "storage_unit": {
        "intro": {
            "title": "Somewhere safe for your stuff",
            "subtitle": "Tell me what you're storing and I'll find units that fit."
        },
        "questions": [
            {
                "id": "unit_size",
                "question": "How much are you storing?",
                "type": "single_select",
                "options": [
                    {"id": "closet", "label": "A Few Boxes", "subtitle": "5x5 closet", "icon": "archivebox"},
                    {"id": "room", "label": "One Room", "subtitle": "10x10 unit", "icon": "bed.double.fill"},
                    {"id": "apartment", "label": "Whole Apartment", "subtitle": "10x20 unit", "icon": "building.2.fill"},
                    {"id": "house", "label": "Whole House", "subtitle": "10x30 or larger", "icon": "house.fill"}
                ]
            },
            {
                "id": "features",
                "question": "Any must-haves?",
                "type": "multi_select",
                "options": [
                    {"id": "climate", "label": "Climate Control", "subtitle": "Wood, electronics, photos", "icon": "thermometer.medium"},
                    {"id": "drive_up", "label": "Drive-Up Access", "icon": "car.fill"},
                    {"id": "24_hour", "label": "24-Hour Access", "icon": "clock.fill"},
                    {"id": "none", "label": "Nothing Special", "icon": "checkmark.circle.fill", "exclusive": True}
                ]
            },
            {
                "id": "duration",
                "question": "How long do you need it?",
                "type": "single_select",
                "options": [
                    {"id": "under_month", "label": "Under a Month", "icon": "calendar"},
                    {"id": "one_to_three", "label": "1-3 Months", "icon": "calendar.badge.plus"},
                    {"id": "long_term", "label": "Longer", "subtitle": "Ask about discounts", "icon": "calendar.badge.clock"}
                ]
            }
        ],
        "recap": {
            "title": "Here's your storage request:",
            "closing": "I'll find units near your move and send you options today.",
            "button": "Find Units"
        },
        "matching": {"sizeWeight": 0.45, "featuresWeight": 0.35, "durationWeight": 0.2}
    },
}


FALLBACK_WORKFLOW: WorkflowData = {
    "intro": {
        "title": "Let's get a few details",
        "subtitle": "Three quick questions so I can line up the right help."
    },
    "questions": [
        {
            "id": "priority",
            "question": "What matters most to you?",
            "type": "single_select",
            "options": [
                {"id": "price", "label": "Best Price", "icon": "dollarsign.circle.fill"},
                {"id": "quality", "label": "Best Quality", "icon": "star.fill"},
                {"id": "speed", "label": "Fastest Available", "icon": "clock.fill"}
            ]
        },
        {
            "id": "requirements",
            "question": "Anything we should plan for?",
            "type": "multi_select",
            "options": [
                {"id": "special_handling", "label": "Special Handling", "icon": "hand.raised.fill"},
                {"id": "flexible_schedule", "label": "Flexible Schedule", "icon": "calendar"},
                {"id": "licensed_insured", "label": "Licensed & Insured", "icon": "checkmark.shield.fill"},
                {"id": "none", "label": "Nothing Special", "icon": "checkmark.circle.fill", "exclusive": True}
            ]
        },
        {
            "id": "timeline",
            "question": "When do you need this done?",
            "type": "single_select",
            "options": [
                {"id": "asap", "label": "ASAP", "icon": "bolt.fill"},
                {"id": "this_week", "label": "This Week", "icon": "calendar"},
                {"id": "this_month", "label": "This Month", "icon": "calendar.badge.plus"},
                {"id": "flexible", "label": "Flexible", "icon": "clock.fill"}
            ]
        }
    ],
    "recap": {
        "title": "Here's what I've got:",
        "closing": "I'll follow up with options that fit.",
        "button": "Submit"
    }
}


_REVIEW = {
    "subtitle": "Here's what we found:",
    "confirmText": "Swipe right to add these tasks",
    "editText": "Swipe left to make changes"
}

MINI_ASSESSMENT_WORKFLOWS: Dict[str, WorkflowData] = {
    "address_change_financial": {
        "id": "address_change_financial",
        "title": "Financial Institutions",
        "taskTitle": "Create financial address change list",
        "intro": {
            "title": "Financial Institutions",
            "subtitle": "Let's make sure all your financial accounts get your new address.",
            "instruction": "Swipe right if you have an account, left if you don't. We'll ask for names after."
        },
        "questions": [
            {"id": "bank", "question": "Do you have a bank or credit union account?", "icon": "building.columns.fill",
             "label": "Bank account", "textEntryPrompt": "Which bank/credit union?",
             "textEntryPlaceholder": "Chase, Wells Fargo, etc.", "allowMultiple": True},
            {"id": "credit_cards", "question": "Do you have any credit cards?", "icon": "creditcard.fill",
             "label": "Credit cards", "textEntryPrompt": "Which credit cards?",
             "textEntryPlaceholder": "Amex, Discover, Capital One, etc.", "allowMultiple": True},
            {"id": "investments", "question": "Do you have investment or brokerage accounts?", "icon": "chart.line.uptrend.xyaxis",
             "label": "Brokerage account", "textEntryPrompt": "Which brokerages?",
             "textEntryPlaceholder": "Fidelity, Schwab, Robinhood, etc.", "allowMultiple": True},
            {"id": "retirement", "question": "Do you have a 401k or IRA?", "icon": "banknote.fill",
             "label": "Retirement account", "textEntryPrompt": "Which provider?",
             "textEntryPlaceholder": "Fidelity, Vanguard, etc."},
            {"id": "loans", "question": "Do you have any loans (auto, student, personal)?", "icon": "signature",
             "label": "Loans", "textEntryPrompt": "Which lenders?",
             "textEntryPlaceholder": "SoFi, Navient, etc.", "allowMultiple": True},
            {"id": "mortgage", "question": "Do you have a mortgage?", "icon": "house.fill",
             "label": "Mortgage", "textEntryPrompt": "Which lender?",
             "textEntryPlaceholder": "Rocket Mortgage, Chase, etc."},
            {"id": "hsa_fsa", "question": "Do you have an HSA or FSA account?", "icon": "cross.case.fill",
             "label": "HSA/FSA", "textEntryPrompt": "Which provider?",
             "textEntryPlaceholder": "HealthEquity, Optum, etc."}
        ],
        "review": {"title": "Financial Accounts", **_REVIEW},
        "taskTemplate": {"titlePrefix": "Update address:", "category": "address_change", "subcategory": "financial", "priority": 1}
    },

    "address_change_health": {
        "id": "address_change_health",
        "title": "Healthcare",
        "taskTitle": "Create healthcare address change list",
        "intro": {
            "title": "Healthcare Providers",
            "subtitle": "Let's update your healthcare providers with your new address.",
            "instruction": "Swipe right if you have this, left if you don't."
        },
        "questions": [
            {"id": "primary_doctor", "question": "Do you have a primary care doctor?", "icon": "stethoscope",
             "label": "Primary care doctor", "textEntryPrompt": "Doctor's name or practice?",
             "textEntryPlaceholder": "Dr. Smith, One Medical, etc."},
            {"id": "dentist", "question": "Do you have a dentist?", "icon": "mouth.fill",
             "label": "Dentist", "textEntryPrompt": "Dentist's name or practice?",
             "textEntryPlaceholder": "Dr. Jones, Aspen Dental, etc."},
            {"id": "health_insurance", "question": "Do you have health insurance?", "icon": "heart.text.square.fill",
             "label": "Health insurance", "textEntryPrompt": "Which provider?",
             "textEntryPlaceholder": "Blue Cross, Aetna, Kaiser, etc."},
            {"id": "dental_insurance", "question": "Do you have dental insurance?", "icon": "face.smiling.fill",
             "label": "Dental insurance", "textEntryPrompt": "Which provider?",
             "textEntryPlaceholder": "Delta Dental, MetLife, etc."},
            {"id": "vision", "question": "Do you have vision insurance or an eye doctor?", "icon": "eye.fill",
             "label": "Vision provider", "textEntryPrompt": "Provider or doctor?",
             "textEntryPlaceholder": "VSP, LensCrafters, etc."},
            {"id": "therapist", "question": "Do you see a therapist or counselor?", "icon": "brain.head.profile",
             "label": "Therapist", "textEntryPrompt": "Therapist's name?",
             "textEntryPlaceholder": "Name or practice"},
            {"id": "specialists", "question": "Do you see any specialists?", "icon": "person.badge.plus",
             "label": "Specialists", "textEntryPrompt": "Which specialists?",
             "textEntryPlaceholder": "Dermatologist, cardiologist, etc.", "allowMultiple": True},
            {"id": "pharmacy", "question": "Do you have a regular pharmacy?", "icon": "pills.fill",
             "label": "Pharmacy", "textEntryPrompt": "Which pharmacy?",
             "textEntryPlaceholder": "CVS, Walgreens, etc."}
        ],
        "review": {"title": "Healthcare Providers", **_REVIEW},
        "taskTemplate": {"titlePrefix": "Update address:", "category": "address_change", "subcategory": "health", "priority": 1}
    },

    "address_change_insurance": {
        "id": "address_change_insurance",
        "title": "Insurance",
        "taskTitle": "Create insurance address change list",
        "intro": {
            "title": "Insurance Policies",
            "subtitle": "Insurance companies need your new address - rates can change by location!",
            "instruction": "Swipe right if you have this coverage, left if you don't."
        },
        "questions": [
            {"id": "auto_insurance", "question": "Do you have auto insurance?", "icon": "car.fill",
             "label": "Auto insurance", "textEntryPrompt": "Which company?",
             "textEntryPlaceholder": "State Farm, Geico, Progressive, etc."},
            {"id": "renters_insurance", "question": "Do you have renters insurance?", "icon": "house.fill",
             "label": "Renters insurance", "textEntryPrompt": "Which company?",
             "textEntryPlaceholder": "Lemonade, State Farm, etc."},
            {"id": "homeowners_insurance", "question": "Do you have homeowners insurance?", "icon": "house.lodge.fill",
             "label": "Homeowners insurance", "textEntryPrompt": "Which company?",
             "textEntryPlaceholder": "Allstate, Liberty Mutual, etc."},
            {"id": "life_insurance", "question": "Do you have life insurance?", "icon": "heart.circle.fill",
             "label": "Life insurance", "textEntryPrompt": "Which company?",
             "textEntryPlaceholder": "Northwestern, MetLife, etc."},
            {"id": "umbrella_insurance", "question": "Do you have umbrella insurance?", "icon": "umbrella.fill",
             "label": "Umbrella insurance", "textEntryPrompt": "Which company?",
             "textEntryPlaceholder": "Usually same as auto/home"}
        ],
        "review": {"title": "Insurance Policies", **_REVIEW},
        # Rates change with the address
        "taskTemplate": {"titlePrefix": "Update address:", "category": "address_change", "subcategory": "insurance", "priority": 2}
    },

    "address_change_fitness": {
        "id": "address_change_fitness",
        "title": "Fitness & Wellness",
        "taskTitle": "Create fitness membership list",
        "intro": {
            "title": "Fitness & Wellness",
            "subtitle": "Let's identify memberships that need to be transferred or canceled.",
            "instruction": "Swipe right if you have this membership, left if you don't."
        },
        "questions": [
            {"id": "gym", "question": "Do you have a gym membership?", "icon": "figure.strengthtraining.traditional",
             "label": "Gym membership", "textEntryPrompt": "Which gym?",
             "textEntryPlaceholder": "LA Fitness, Planet Fitness, Equinox, etc."},
            {"id": "crossfit", "question": "Are you a CrossFit member?", "icon": "figure.cross.training",
             "label": "CrossFit membership", "textEntryPrompt": "Which box?",
             "textEntryPlaceholder": "CrossFit [Name]"},
            {"id": "yoga", "question": "Do you have a yoga studio membership?", "icon": "figure.yoga",
             "label": "Yoga studio", "textEntryPrompt": "Which studio?",
             "textEntryPlaceholder": "CorePower, YogaWorks, etc."},
            {"id": "pilates", "question": "Do you have a Pilates membership?", "icon": "figure.pilates",
             "label": "Pilates studio", "textEntryPrompt": "Which studio?",
             "textEntryPlaceholder": "Club Pilates, etc."},
            {"id": "spin", "question": "Do you do spin or cycling classes?", "icon": "bicycle",
             "label": "Spin studio", "textEntryPrompt": "Which studio?",
             "textEntryPlaceholder": "SoulCycle, Peloton studio, etc."},
            {"id": "pool", "question": "Do you have a pool or swim club membership?", "icon": "figure.pool.swim",
             "label": "Swim club", "textEntryPrompt": "Which pool/club?",
             "textEntryPlaceholder": "YMCA, local pool, etc."},
            {"id": "country_club", "question": "Are you a country club member?", "icon": "flag.fill",
             "label": "Country club", "textEntryPrompt": "Which club?",
             "textEntryPlaceholder": "Club name"},
            {"id": "spa", "question": "Do you have a spa or massage membership?", "icon": "sparkles",
             "label": "Spa membership", "textEntryPrompt": "Which spa?",
             "textEntryPlaceholder": "Massage Envy, Hand & Stone, etc."}
        ],
        "review": {"title": "Fitness Memberships", **_REVIEW},
        "taskTemplate": {"titlePrefix": "Cancel/transfer:", "category": "address_change", "subcategory": "fitness", "priority": 1}
    },

    "address_change_memberships": {
        "id": "address_change_memberships",
        "title": "Memberships",
        "taskTitle": "Create membership address change list",
        "intro": {
            "title": "Memberships",
            "subtitle": "Let's catch any memberships that need your new address.",
            "instruction": "Swipe right if you have this, left if you don't."
        },
        "questions": [
            {"id": "costco", "question": "Do you have a Costco membership?", "icon": "cart.fill", "label": "Costco"},
            {"id": "sams", "question": "Do you have a Sam's Club membership?", "icon": "cart.fill", "label": "Sam's Club"},
            {"id": "bjs", "question": "Do you have a BJ's membership?", "icon": "cart.fill", "label": "BJ's"},
            {"id": "aaa", "question": "Do you have AAA?", "icon": "car.circle.fill", "label": "AAA"},
            {"id": "amazon_prime", "question": "Do you have Amazon Prime?", "icon": "shippingbox.fill", "label": "Amazon Prime"},
            {"id": "library", "question": "Do you have a library card?", "icon": "books.vertical.fill", "label": "Library card"},
            {"id": "museums", "question": "Do you have any museum memberships?", "icon": "building.columns.fill",
             "label": "Museum membership", "textEntryPrompt": "Which museums?",
             "textEntryPlaceholder": "Science museum, art museum, etc.", "allowMultiple": True},
            {"id": "other_memberships", "question": "Any other memberships?", "icon": "person.crop.circle.badge.plus",
             "label": "Other membership", "textEntryPrompt": "What memberships?",
             "textEntryPlaceholder": "Professional orgs, clubs, etc.", "allowMultiple": True}
        ],
        "review": {"title": "Memberships", **_REVIEW},
        "taskTemplate": {"titlePrefix": "Update address:", "category": "address_change", "subcategory": "memberships", "priority": 1}
    },

    "address_change_subscriptions": {
        "id": "address_change_subscriptions",
        "title": "Subscriptions",
        "taskTitle": "Create subscription address change list",
        "intro": {
            "title": "Subscriptions & Delivery",
            "subtitle": "Let's make sure nothing gets delivered to your old address!",
            "instruction": "Swipe right if you subscribe to this, left if you don't."
        },
        "questions": [
            {"id": "meal_kit", "question": "Do you get meal kits delivered?", "icon": "fork.knife",
             "label": "Meal kit", "textEntryPrompt": "Which service?", "textEntryPlaceholder": "HelloFresh, Blue Apron, etc."},
            {"id": "pet_food", "question": "Do you get pet food or supplies delivered?", "icon": "pawprint.fill",
             "label": "Pet supplies", "textEntryPrompt": "Which service?", "textEntryPlaceholder": "Chewy, BarkBox, etc."},
            {"id": "vitamins", "question": "Do you subscribe to vitamins or supplements?", "icon": "pill.fill",
             "label": "Vitamins", "textEntryPrompt": "Which service?", "textEntryPlaceholder": "Ritual, Care/of, etc."},
            {"id": "coffee", "question": "Do you get coffee delivered?", "icon": "cup.and.saucer.fill",
             "label": "Coffee delivery", "textEntryPrompt": "Which service?", "textEntryPlaceholder": "Trade, Atlas, etc."},
            {"id": "wine", "question": "Are you in a wine club?", "icon": "wineglass.fill",
             "label": "Wine club", "textEntryPrompt": "Which club?", "textEntryPlaceholder": "Winc, local winery, etc."},
            {"id": "beauty", "question": "Do you get beauty products delivered?", "icon": "sparkles",
             "label": "Beauty box", "textEntryPrompt": "Which service?", "textEntryPlaceholder": "Ipsy, Birchbox, etc."},
            {"id": "clothing", "question": "Do you have a clothing subscription?", "icon": "tshirt.fill",
             "label": "Clothing subscription", "textEntryPrompt": "Which service?",
             "textEntryPlaceholder": "Stitch Fix, Rent the Runway, etc."},
            {"id": "other_subscriptions", "question": "Any other subscription deliveries?", "icon": "shippingbox.fill",
             "label": "Other subscription", "textEntryPrompt": "What subscriptions?",
             "textEntryPlaceholder": "Describe your subscriptions", "allowMultiple": True}
        ],
        "review": {"title": "Subscriptions", **_REVIEW},
        # Deliveries go to the wrong address otherwise
        "taskTemplate": {"titlePrefix": "Update address:", "category": "address_change", "subcategory": "subscriptions", "priority": 2}
    },
}
