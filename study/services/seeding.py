"""
One-time installation of the bundled sample chapters.

The seeding step is guarded by a SeedMarker row written in the same
transaction as the documents, so it runs once per database no matter
how many processes start up.
"""

import logging

from django.db import IntegrityError, transaction

from study.models import Chunk, Document, SeedMarker


logger = logging.getLogger(__name__)

SAMPLE_MARKER = 'sample-documents'

SAMPLE_DOCUMENTS = [
    {
        "original_name": "NCERT Physics Class XI - Chapter 1: Physical World",
        "content": """Chapter 1: Physical World

The Physical World is a fascinating place to explore. Physics is the most fundamental of all sciences which attempts to describe the whole nature in terms of simple fundamental laws.

What is Physics?
Physics is the study of matter, energy and their interactions. It seeks to understand how the universe behaves at a fundamental level.

Scope and Excitement of Physics:
Physics covers a tremendous range of phenomena. From the smallest particles to the largest galaxies, physics helps us understand the natural world.

Fundamental Forces in Nature:
1. Gravitational Force
2. Electromagnetic Force
3. Strong Nuclear Force
4. Weak Nuclear Force

Physics, Technology and Society:
Physics has played a crucial role in the development of technology and has significantly impacted society.

Key Concepts:
- Motion and its laws
- Energy and its conservation
- Matter and its properties
- Forces and their effects""",
        "chunks": [
            ("The Physical World is a fascinating place to explore. Physics is the most fundamental of all sciences which attempts to describe the whole nature in terms of simple fundamental laws.", 1),
            ("Physics is the study of matter, energy and their interactions. It seeks to understand how the universe behaves at a fundamental level.", 1),
            ("Fundamental Forces in Nature: 1. Gravitational Force 2. Electromagnetic Force 3. Strong Nuclear Force 4. Weak Nuclear Force", 2),
        ],
    },
    {
        "original_name": "NCERT Physics Class XI - Chapter 2: Units and Measurements",
        "content": """Chapter 2: Units and Measurements

Measurement is fundamental to all experimental sciences. In this chapter, we will learn about the importance of measurements in physics.

The International System of Units (SI):
The SI system is based on seven fundamental units:
1. Length (metre, m)
2. Mass (kilogram, kg)
3. Time (second, s)
4. Electric current (ampere, A)
5. Temperature (kelvin, K)
6. Amount of substance (mole, mol)
7. Luminous intensity (candela, cd)

Measurement of Length:
- For very small lengths: Vernier callipers, screw gauge
- For moderate lengths: Metre scale
- For large distances: Triangulation method

Measurement of Mass:
- Common balance for moderate masses
- Physical balance for precise measurements
- Spring balance for approximate measurements

Significant Figures:
Rules for significant figures help in expressing measurements accurately.

Dimensional Analysis:
Every physical quantity can be expressed in terms of fundamental dimensions.""",
        "chunks": [
            ("Measurement is fundamental to all experimental sciences. In this chapter, we will learn about the importance of measurements in physics.", 1),
            ("The SI system is based on seven fundamental units: Length (metre), Mass (kilogram), Time (second), Electric current (ampere), Temperature (kelvin), Amount of substance (mole), Luminous intensity (candela)", 1),
            ("Dimensional Analysis: Every physical quantity can be expressed in terms of fundamental dimensions.", 3),
        ],
    },
    {
        "original_name": "NCERT Physics Class XI - Chapter 3: Motion in a Straight Line",
        "content": """Chapter 3: Motion in a Straight Line

Motion is one of the most common phenomena in the universe. In this chapter, we study the simplest type of motion - motion in a straight line.

Position and Displacement:
- Position of an object is its location with respect to a chosen reference point
- Displacement is the change in position of an object

Velocity and Speed:
- Speed is the rate of change of distance
- Velocity is the rate of change of displacement
- Average velocity = Total displacement / Total time

Acceleration:
- Acceleration is the rate of change of velocity
- Average acceleration = Change in velocity / Time taken

Equations of Motion:
For uniformly accelerated motion:
1. v = u + at
2. s = ut + (1/2)at²
3. v² = u² + 2as

Where: u = initial velocity, v = final velocity, a = acceleration, t = time, s = displacement""",
        "chunks": [
            ("Motion is one of the most common phenomena in the universe. In this chapter, we study the simplest type of motion - motion in a straight line.", 1),
            ("Position of an object is its location with respect to a chosen reference point. Displacement is the change in position of an object.", 1),
            ("Equations of Motion for uniformly accelerated motion: v = u + at, s = ut + (1/2)at², v² = u² + 2as", 3),
        ],
    },
]


def seed_sample_documents() -> int:
    """
    Install the sample chapters unless they were installed before.

    Returns:
        Number of documents created (0 when already seeded).
    """
    if SeedMarker.objects.filter(name=SAMPLE_MARKER).exists():
        logger.info("Sample documents already seeded")
        return 0

    try:
        with transaction.atomic():
            SeedMarker.objects.create(name=SAMPLE_MARKER)
            for sample in SAMPLE_DOCUMENTS:
                document = Document.objects.create(
                    original_name=sample["original_name"],
                    content=sample["content"],
                    is_sample=True,
                )
                Chunk.objects.bulk_create([
                    Chunk(document=document, text=text, page_number=page_number, chunk_index=index)
                    for index, (text, page_number) in enumerate(sample["chunks"])
                ])
    except IntegrityError:
        # Another process wrote the marker first
        logger.info("Sample documents seeded concurrently by another process")
        return 0

    logger.info(f"Seeded {len(SAMPLE_DOCUMENTS)} sample documents")
    return len(SAMPLE_DOCUMENTS)
