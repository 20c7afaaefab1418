from __future__ import annotations

from typing import Dict, List


def sample_reference_rows() -> List[Dict[str, str]]:
    """
    Hardcoded slice of the door reference sheet, shaped like rows read from the CSV.

    Intent:
    - Enough to drive the order form and the smoke test without the real file.
    - Exercises the grouping rules: continuation rows carry only a size, option columns
      ride along on model/size rows, and one size row appears before any model.
    """
    return [
        {"Door Model": "", "Size": "24x80"},  # before any model: dropped
        {
            "Door Model": "Palermo 3lt",
            "Size": "30x80",
            "Glass Options": "Clear Low-E",
            "Jamb Sizes": "4-9/16",
            "Hinge Finish": "Oil Rubbed Bronze",
            "Sill Finish": "Bronze",
            "Handle Prep": "Single Bore",
            "Swing": "Left Hand Inswing",
        },
        {
            "Door Model": "",
            "Size": "32x80",
            "Glass Options": "Frosted",
            "Jamb Sizes": "6-9/16",
            "Hinge Finish": "Satin Nickel",
            "Sill Finish": "Mill",
            "Handle Prep": "GU Multipoint Lock System (Upcharge Applies)",
            "Swing": "Right Hand Inswing",
        },
        {
            "Door Model": "",
            "Size": "36x80",
            "Jamb Sizes": "Other (Please Specify)",
            "Hinge Finish": "Black",
            "Handle Prep": "Other (Please Specify)",
            "Swing": "Left Hand Outswing",
        },
        {"Door Model": "Ventura", "Size": "36x80", "Glass Options": "Clear Low-E"},
        {"Door Model": "", "Size": "42x96", "Swing": "Right Hand Outswing"},
        {"Door Model": "Santa Fe", "Size": "36x80", "Glass Options": "Seeded"},
        {"Door Model": "", "Size": "36x96"},
    ]
