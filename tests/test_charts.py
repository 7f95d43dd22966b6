from datetime import timedelta

from agroalert.charts import progress_chart, progress_frame
from agroalert.models import Crop, FarmerCrop


def test_progress_frame(now):
    crops = [
        FarmerCrop(id="1", farmer_id="f", crop_id="c1", planting_date=now.date() - timedelta(days=30),
                   crop=Crop(id="c1", name="Maize", growth_days=120)),
        FarmerCrop(id="2", farmer_id="f", crop_id="c2", planting_date=now.date() - timedelta(days=100),
                   crop=Crop(id="c2", name="Beans", growth_days=90)),
        FarmerCrop(id="3", farmer_id="f", crop_id="c9"),
    ]
    df = progress_frame(crops, now)
    assert list(df["crop"]) == ["Maize", "Beans", "c9"]
    assert list(df["progress"]) == [25.0, 100.0, 0.0]
    assert list(df["stage"]) == ["Vegetative", "Maturity", "Early Growth"]
    assert progress_chart(df) is not None


def test_progress_frame_empty(now):
    df = progress_frame([], now)
    assert df.empty
    assert "progress" in df.columns
