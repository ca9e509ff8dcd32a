"""Static catalog of recommended physics lecture videos."""

VIDEO_CATALOG = [
    {
        "id": "physics_fundamentals_1",
        "title": "Physics Fundamentals: Motion and Forces",
        "channel": "Khan Academy",
        "thumbnail": "https://img.youtube.com/vi/ZM8ECpBuQYE/maxresdefault.jpg",
        "duration": "15:30",
        "views": "2.5M",
        "likes": "125K",
        "description": "Understanding the basic concepts of motion, velocity, acceleration and Newton's laws of motion.",
        "url": "https://youtube.com/watch?v=ZM8ECpBuQYE",
        "tags": ["motion", "force", "velocity", "acceleration", "newton", "laws"],
        "difficulty": "beginner",
        "chapter": "mechanics",
    },
    {
        "id": "work_energy_power",
        "title": "Work, Energy and Power - Complete Chapter",
        "channel": "Physics Wallah",
        "thumbnail": "https://img.youtube.com/vi/w4QFJb9a8vo/maxresdefault.jpg",
        "duration": "45:20",
        "views": "1.8M",
        "likes": "98K",
        "description": "Comprehensive explanation of work-energy theorem, kinetic and potential energy.",
        "url": "https://youtube.com/watch?v=w4QFJb9a8vo",
        "tags": ["energy", "work", "power", "mechanics", "kinetic", "potential"],
        "difficulty": "intermediate",
        "chapter": "mechanics",
    },
    {
        "id": "gravitation_orbital",
        "title": "Gravitation and Orbital Motion",
        "channel": "Unacademy Physics",
        "thumbnail": "https://img.youtube.com/vi/7i808check8/maxresdefault.jpg",
        "duration": "28:45",
        "views": "890K",
        "likes": "45K",
        "description": "Newton's law of universal gravitation, gravitational field, and satellite motion.",
        "url": "https://youtube.com/watch?v=7i808check8",
        "tags": ["gravity", "motion", "force", "mechanics", "orbital", "satellite"],
        "difficulty": "intermediate",
        "chapter": "gravitation",
    },
    {
        "id": "oscillations_shm",
        "title": "Oscillations and Simple Harmonic Motion",
        "channel": "Vedantu Physics",
        "thumbnail": "https://img.youtube.com/vi/O-QqC52kquk/maxresdefault.jpg",
        "duration": "35:15",
        "views": "1.2M",
        "likes": "67K",
        "description": "Understanding SHM, pendulum motion, and wave concepts in physics.",
        "url": "https://youtube.com/watch?v=O-QqC52kquk",
        "tags": ["oscillations", "waves", "motion", "mechanics", "pendulum", "frequency"],
        "difficulty": "intermediate",
        "chapter": "waves",
    },
    {
        "id": "thermodynamics_laws",
        "title": "Thermodynamics Laws and Applications",
        "channel": "BYJU'S Physics",
        "thumbnail": "https://img.youtube.com/vi/GiAj9WL4itE/maxresdefault.jpg",
        "duration": "52:10",
        "views": "1.5M",
        "likes": "78K",
        "description": "First and second law of thermodynamics with real-world applications.",
        "url": "https://youtube.com/watch?v=GiAj9WL4itE",
        "tags": ["thermodynamics", "energy", "heat", "temperature", "entropy", "laws"],
        "difficulty": "advanced",
        "chapter": "thermodynamics",
    },
    {
        "id": "waves_sound",
        "title": "Waves and Sound Physics",
        "channel": "Physics Galaxy",
        "thumbnail": "https://img.youtube.com/vi/qNf96Tslhz0/maxresdefault.jpg",
        "duration": "40:30",
        "views": "750K",
        "likes": "42K",
        "description": "Wave properties, sound waves, Doppler effect, and wave interference.",
        "url": "https://youtube.com/watch?v=qNf96Tslhz0",
        "tags": ["waves", "sound", "oscillations", "frequency", "amplitude", "doppler"],
        "difficulty": "intermediate",
        "chapter": "waves",
    },
    {
        "id": "electromagnetic_waves",
        "title": "Electromagnetic Waves and Light",
        "channel": "Physics Concepts",
        "thumbnail": "https://img.youtube.com/vi/lwfJPc-rSXw/maxresdefault.jpg",
        "duration": "38:20",
        "views": "680K",
        "likes": "39K",
        "description": "Understanding electromagnetic spectrum, light properties, and wave-particle duality.",
        "url": "https://youtube.com/watch?v=lwfJPc-rSXw",
        "tags": ["electromagnetic", "light", "waves", "optics", "spectrum", "photon"],
        "difficulty": "advanced",
        "chapter": "optics",
    },
    {
        "id": "units_measurements",
        "title": "Units and Measurements - Physics Basics",
        "channel": "Khan Academy Physics",
        "thumbnail": "https://img.youtube.com/vi/s-4b3kwofEs/maxresdefault.jpg",
        "duration": "22:15",
        "views": "1.1M",
        "likes": "55K",
        "description": "SI units, dimensional analysis, and measurement techniques in physics.",
        "url": "https://youtube.com/watch?v=s-4b3kwofEs",
        "tags": ["measurements", "units", "physics", "dimensions", "analysis", "scale"],
        "difficulty": "beginner",
        "chapter": "fundamentals",
    },
    {
        "id": "vectors_scalars",
        "title": "Vectors and Scalars - Complete Guide",
        "channel": "Professor Dave Explains",
        "thumbnail": "https://img.youtube.com/vi/ml4NSzCQobk/maxresdefault.jpg",
        "duration": "25:40",
        "views": "920K",
        "likes": "48K",
        "description": "Understanding vector quantities, scalar quantities, and vector operations.",
        "url": "https://youtube.com/watch?v=ml4NSzCQobk",
        "tags": ["vectors", "scalars", "mathematics", "physics", "direction", "magnitude"],
        "difficulty": "beginner",
        "chapter": "mathematics",
    },
    {
        "id": "circular_motion",
        "title": "Circular Motion and Centripetal Force",
        "channel": "Michel van Biezen",
        "thumbnail": "https://img.youtube.com/vi/bpFK2VCRHUs/maxresdefault.jpg",
        "duration": "33:25",
        "views": "560K",
        "likes": "34K",
        "description": "Uniform circular motion, centripetal acceleration, and real-world applications.",
        "url": "https://youtube.com/watch?v=bpFK2VCRHUs",
        "tags": ["circular", "motion", "centripetal", "acceleration", "rotation", "angular"],
        "difficulty": "intermediate",
        "chapter": "mechanics",
    },
]
