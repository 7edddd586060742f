from .engagement_models import Wishlist, RecentlyViewed
