"""Example: use the prediction layer directly (no Flask, no backend).

Controllers are a thin layer; the calculations live in the services.
"""

from bunk_tracker.container import build_container
from bunk_tracker.subjects.model import Subject


def main():
    container = build_container()
    subject = Subject(subject_id="demo", name="Maths", total_lectures=40, attended_lectures=30)

    prediction = container.prediction_engine.predict(subject)
    print(prediction.recommendation)
    print(container.prediction_engine.simulate(subject, 3).to_dict())


if __name__ == "__main__":
    main()
